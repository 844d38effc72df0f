"""Little-endian primitive decoding at an offset."""

from __future__ import annotations

import struct

from .errors import InvalidFieldWidth

_U16 = struct.Struct("<H")
_U32 = struct.Struct("<I")
_I64 = struct.Struct("<q")
_F32 = struct.Struct("<f")
_F64 = struct.Struct("<d")

VARINT_WIDTHS = range(1, 5)
WIDE_VARINT_WIDTHS = range(0, 9)


def read_u8(data: bytes, offset: int = 0) -> int:
    return data[offset]


def read_u16(data: bytes, offset: int = 0) -> int:
    return _U16.unpack_from(data, offset)[0]


def read_u32(data: bytes, offset: int = 0) -> int:
    return _U32.unpack_from(data, offset)[0]


def read_i64(data: bytes, offset: int = 0) -> int:
    return _I64.unpack_from(data, offset)[0]


def read_f32(data: bytes, offset: int = 0) -> float:
    return _F32.unpack_from(data, offset)[0]


def read_f64(data: bytes, offset: int = 0) -> float:
    return _F64.unpack_from(data, offset)[0]


def read_varint(data: bytes, offset: int, width: int) -> int:
    """Decode an unsigned 1-4 byte little-endian integer."""
    if width == 1:
        return data[offset]
    if width == 2:
        return _U16.unpack_from(data, offset)[0]
    if width == 3:
        return (data[offset]
                | (data[offset + 1] << 8)
                | (data[offset + 2] << 16))
    if width == 4:
        return _U32.unpack_from(data, offset)[0]
    raise InvalidFieldWidth(width, VARINT_WIDTHS)


def read_varint_wide(data: bytes, offset: int, width: int) -> int:
    """Decode an unsigned 0-8 byte little-endian integer without precision loss.

    A width of 0 is a field absent from the wire and decodes to 0.
    """
    if width not in WIDE_VARINT_WIDTHS:
        raise InvalidFieldWidth(width, WIDE_VARINT_WIDTHS)
    if offset + width > len(data):
        raise struct.error(
            f"need {width} bytes at offset {offset}, have {len(data) - offset}")
    return int.from_bytes(data[offset:offset + width], "little", signed=False)


def decode_text(raw: bytes) -> str:
    """Decode UTF-8, mapping bytes one-to-one to characters if that fails."""
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        return raw.decode("latin-1")
