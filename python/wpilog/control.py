"""Control record (entry id 0) decoding and entry-table updates.

Control payload layout:
  [type: uint8]            0 = start, 1 = finish, 2 = set_metadata
  [entry_id: uint32 LE]
  start:         [name][type][metadata]
  set_metadata:  [metadata]
Strings are [len: uint32 LE][len bytes UTF-8].
"""

from __future__ import annotations

import logging

from .errors import MalformedControlRecord, UnknownControlType
from .primitives import decode_text, read_u32
from .records import (
    CONTROL_ENTRY_ID, ControlPayload, ControlType, Entry,
    FinishPayload, SetMetadataPayload, StartPayload,
)

logger = logging.getLogger(__name__)


def _need(payload: bytes, pos: int, n: int, what: str,
          offset: int | None) -> None:
    if pos + n > len(payload):
        raise MalformedControlRecord(
            f"control record truncated reading {what}: needed {n} bytes at "
            f"payload position {pos}, payload is {len(payload)} bytes", offset)


def _read_string(payload: bytes, pos: int, what: str,
                 offset: int | None) -> tuple[str, int]:
    _need(payload, pos, 4, f"{what} length", offset)
    length = read_u32(payload, pos)
    pos += 4
    _need(payload, pos, length, what, offset)
    return decode_text(payload[pos:pos + length]), pos + length


def decode_control(payload: bytes, offset: int | None = None) -> ControlPayload:
    """Decode a control record payload into its typed form.

    *offset* is the stream position of the payload, used in error messages.
    """
    _need(payload, 0, 1, "control type", offset)
    tag = payload[0]
    try:
        kind = ControlType(tag)
    except ValueError:
        raise UnknownControlType(tag, offset) from None

    _need(payload, 1, 4, "entry id", offset)
    entry_id = read_u32(payload, 1)
    pos = 5

    if kind is ControlType.START:
        if entry_id == CONTROL_ENTRY_ID:
            raise MalformedControlRecord(
                f"start record declares reserved entry id {entry_id}", offset)
        name, pos = _read_string(payload, pos, "entry name", offset)
        type_, pos = _read_string(payload, pos, "entry type", offset)
        metadata, pos = _read_string(payload, pos, "metadata", offset)
        return StartPayload(entry_id, name, type_, metadata)
    if kind is ControlType.FINISH:
        return FinishPayload(entry_id)
    if kind is ControlType.SET_METADATA:
        metadata, pos = _read_string(payload, pos, "metadata", offset)
        return SetMetadataPayload(entry_id, metadata)
    raise AssertionError(f"unhandled control type {kind!r}")


def apply_control(entries: dict[int, Entry], control: ControlPayload) -> None:
    """Mutate the entry table according to a decoded control payload."""
    if isinstance(control, StartPayload):
        old = entries.get(control.entry_id)
        if old is not None:
            logger.warning(
                "entry %d re-declared as %r (%s), replacing %r (%s) with "
                "%d records", control.entry_id, control.entry_name,
                control.entry_type, old.name, old.type, len(old.records))
        entries[control.entry_id] = Entry(
            id=control.entry_id,
            name=control.entry_name,
            type=control.entry_type,
            metadata=control.metadata,
        )
        return

    entry = entries.get(control.entry_id)
    if entry is None:
        logger.warning("%s for unknown entry %d, ignoring",
                       control.type.name.lower(), control.entry_id)
        return

    if isinstance(control, FinishPayload):
        entry.finished = True
    elif isinstance(control, SetMetadataPayload):
        entry.metadata = control.metadata
