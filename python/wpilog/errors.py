"""Exception hierarchy for WPILOG decoding."""

from __future__ import annotations


class WPILogError(Exception):
    """Base class for every structural decode failure."""

    def __init__(self, message: str, offset: int | None = None):
        if offset is not None:
            message = f"{message} (at byte offset {offset})"
        super().__init__(message)
        self.offset = offset


class MalformedHeader(WPILogError):
    pass


class InvalidMagic(MalformedHeader):
    def __init__(self, found: bytes, offset: int | None = 0):
        super().__init__(
            f"not a WPILOG file: expected magic b'WPILOG', found {found!r}",
            offset)
        self.found = found


class UnsupportedVersion(MalformedHeader):
    def __init__(self, major: int, minor: int, offset: int | None = 6):
        super().__init__(
            f"unsupported WPILOG version {major}.{minor}, supported: 1.0",
            offset)
        self.major = major
        self.minor = minor


class EndOfStream(WPILogError):
    """Source exhausted in the middle of a field."""

    def __init__(self, what: str, expected: int, available: int,
                 offset: int | None = None):
        super().__init__(
            f"unexpected end of stream reading {what}: "
            f"needed {expected} bytes, {available} available", offset)
        self.what = what
        self.expected = expected
        self.available = available


class TruncatedHeader(MalformedHeader, EndOfStream):
    def __init__(self, what: str, expected: int, available: int,
                 offset: int | None = None):
        EndOfStream.__init__(self, what, expected, available, offset)


class InvalidFieldWidth(WPILogError):
    def __init__(self, width: int, allowed: range, offset: int | None = None):
        super().__init__(
            f"invalid field width {width}, expected "
            f"{allowed.start}..{allowed.stop - 1} bytes", offset)
        self.width = width
        self.allowed = allowed


class UnknownEntryReference(WPILogError):
    def __init__(self, entry_id: int, offset: int | None = None):
        super().__init__(
            f"data record references entry {entry_id} before any start "
            f"record declared it", offset)
        self.entry_id = entry_id


class UnknownControlType(WPILogError):
    def __init__(self, control_type: int, offset: int | None = None):
        super().__init__(f"unknown control record type {control_type}",
                         offset)
        self.control_type = control_type


class MalformedControlRecord(WPILogError):
    pass


class PayloadTooLarge(WPILogError):
    def __init__(self, size: int, limit: int, offset: int | None = None):
        super().__init__(
            f"record payload of {size} bytes exceeds limit of {limit}",
            offset)
        self.size = size
        self.limit = limit


class SourceError(WPILogError):
    """The byte source itself failed; the cause is chained."""
