"""WPILOG file header parsing.

File header layout:
  [magic: "WPILOG" 6 bytes]
  [version: uint16 LE, 0x0100 for 1.0]
  [extra_len: uint32 LE]
  [extra: extra_len bytes UTF-8]
"""

from __future__ import annotations

import logging
import struct

from .buffer import IncrementalBuffer
from .errors import EndOfStream, InvalidMagic, TruncatedHeader, UnsupportedVersion
from .primitives import decode_text
from .records import Header

logger = logging.getLogger(__name__)

MAGIC = b"WPILOG"
VERSION = 0x0100
HEADER_FMT = "<6sHI"
HEADER_SIZE = struct.calcsize(HEADER_FMT)  # 12


async def parse_header(buf: IncrementalBuffer) -> Header:
    """Read and validate the file header, leaving *buf* at the first record."""
    start = buf.position
    try:
        await buf.ensure(HEADER_SIZE, "file header")
    except EndOfStream as exc:
        raise TruncatedHeader("file header", exc.expected, exc.available,
                              start) from None

    magic, version, extra_len = struct.unpack(HEADER_FMT,
                                              buf.peek_bytes(HEADER_SIZE))
    if magic != MAGIC:
        raise InvalidMagic(magic, start)
    if version != VERSION:
        raise UnsupportedVersion(version >> 8, version & 0xFF, start + 6)
    buf.consume(HEADER_SIZE)

    extra = ""
    if extra_len > 0:
        try:
            raw = await buf.read(extra_len, "header extra")
        except EndOfStream as exc:
            raise TruncatedHeader("header extra", exc.expected, exc.available,
                                  exc.offset) from None
        extra = decode_text(raw)

    logger.debug("WPILOG header: version %d.%d, %d bytes extra",
                 version >> 8, version & 0xFF, extra_len)
    return Header(version=version, extra=extra)
