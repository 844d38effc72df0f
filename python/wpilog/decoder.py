"""Streaming WPILOG decoder.

Record layout:
  [bitfield: uint8]
      bits 0-1  entry id length - 1
      bits 2-3  payload size length - 1
      bits 4-6  timestamp length - 1
  [entry_id: 1-4 bytes LE]
  [payload_size: 1-4 bytes LE]
  [timestamp: 1-8 bytes LE, microseconds]
  [payload: payload_size bytes]

Records addressed to entry 0 are control records; everything else is data
for an entry declared by an earlier start record.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import AsyncIterable, AsyncIterator, Union

from .buffer import IncrementalBuffer
from .control import apply_control, decode_control
from .errors import PayloadTooLarge, UnknownEntryReference
from .header import parse_header
from .primitives import read_varint, read_varint_wide
from .records import (
    CONTROL_ENTRY_ID, ControlRecord, DataRecord, Entry, Header, WPILog,
)
from .sources import DEFAULT_CHUNK_SIZE, iter_bytes, iter_file

logger = logging.getLogger(__name__)

Record = Union[DataRecord, ControlRecord]

_INT64_SIGN = 1 << 63


def decode_bitfield(bitfield: int) -> tuple[int, int, int]:
    """Return (entry_id_len, payload_size_len, timestamp_len) in bytes."""
    return (
        (bitfield & 0x3) + 1,
        ((bitfield >> 2) & 0x3) + 1,
        ((bitfield >> 4) & 0x7) + 1,
    )


class WPILogParser:
    """Pull-driven decoder over an async byte source.

    ``records()`` yields each record as soon as its payload is complete;
    ``parse()`` drains the source and returns the whole log.  ``header`` and
    ``entries`` are live while iterating.  An instance can be driven once.
    """

    def __init__(self, source: AsyncIterable[bytes], *,
                 max_payload_size: int | None = None,
                 keep_control_records: bool = True):
        self._buf = IncrementalBuffer(source)
        self.max_payload_size = max_payload_size
        self.keep_control_records = keep_control_records
        self.header: Header | None = None
        self.entries: dict[int, Entry] = {}
        self.control_records: list[ControlRecord] = []
        self.record_count = 0
        self.data_record_count = 0
        self._started = False

    @classmethod
    def from_file(cls, path: str | Path,
                  chunk_size: int = DEFAULT_CHUNK_SIZE,
                  **kwargs) -> WPILogParser:
        return cls(iter_file(path, chunk_size), **kwargs)

    @classmethod
    def from_bytes(cls, data: bytes,
                   chunk_size: int = DEFAULT_CHUNK_SIZE,
                   **kwargs) -> WPILogParser:
        return cls(iter_bytes(data, chunk_size), **kwargs)

    @property
    def buffer(self) -> IncrementalBuffer:
        return self._buf

    async def records(self) -> AsyncIterator[Record]:
        """Parse the header, then yield records in stream order."""
        if self._started:
            raise RuntimeError("WPILogParser can only be driven once")
        self._started = True

        self.header = await parse_header(self._buf)
        while not await self._buf.at_end():
            yield await self._read_record()

    async def parse(self) -> WPILog:
        """Drain the source and return the complete log."""
        async for _ in self.records():
            pass
        if self.header is None:
            raise RuntimeError("source ended without a header being parsed")
        return WPILog(header=self.header, entries=self.entries,
                      control_records=self.control_records,
                      data_record_count=self.data_record_count)

    async def _read_record(self) -> Record:
        buf = self._buf
        record_offset = buf.position

        bitfield = (await buf.read(1, "record bitfield"))[0]
        id_len, size_len, ts_len = decode_bitfield(bitfield)

        header_len = id_len + size_len + ts_len
        fields = await buf.read(header_len, "record header")
        entry_id = read_varint(fields, 0, id_len)
        payload_size = read_varint(fields, id_len, size_len)
        timestamp = read_varint_wide(fields, id_len + size_len, ts_len)
        if timestamp >= _INT64_SIGN:
            # Two's-complement int64 on the wire.
            timestamp -= 1 << 64

        if self.max_payload_size is not None \
                and payload_size > self.max_payload_size:
            raise PayloadTooLarge(payload_size, self.max_payload_size,
                                  record_offset)

        payload_offset = buf.position
        payload = await buf.read(payload_size, "record payload")
        self.record_count += 1

        if entry_id == CONTROL_ENTRY_ID:
            control = decode_control(payload, payload_offset)
            apply_control(self.entries, control)
            record = ControlRecord(entry_id, timestamp, payload, control)
            if self.keep_control_records:
                self.control_records.append(record)
            logger.debug("control %s entry=%d ts=%d",
                         control.type.name.lower(), control.entry_id,
                         timestamp)
            return record

        entry = self.entries.get(entry_id)
        if entry is None:
            raise UnknownEntryReference(entry_id, record_offset)
        data = DataRecord(entry_id, timestamp, payload)
        entry.records.append(data)
        self.data_record_count += 1
        return data


def parse_bytes(data: bytes, **kwargs) -> WPILog:
    """Parse an in-memory WPILOG image."""
    return asyncio.run(WPILogParser.from_bytes(data, **kwargs).parse())


def read_log(path: str | Path, chunk_size: int = DEFAULT_CHUNK_SIZE,
             **kwargs) -> WPILog:
    """Parse a WPILOG file from disk."""
    return asyncio.run(
        WPILogParser.from_file(path, chunk_size, **kwargs).parse())
