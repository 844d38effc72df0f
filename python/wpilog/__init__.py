"""wpilog - Streaming WPILOG decoder and tooling."""

from .records import (
    Header, Entry, BaseRecord, DataRecord, ControlRecord, ControlType,
    StartPayload, FinishPayload, SetMetadataPayload, WPILog,
)
from .buffer import IncrementalBuffer
from .decoder import WPILogParser, parse_bytes, read_log
from .sources import iter_bytes, iter_file, iter_tcp
from .errors import (
    WPILogError, MalformedHeader, InvalidMagic, UnsupportedVersion,
    TruncatedHeader, EndOfStream, InvalidFieldWidth, UnknownEntryReference,
    UnknownControlType, MalformedControlRecord, PayloadTooLarge, SourceError,
)

__all__ = [
    "Header", "Entry", "BaseRecord", "DataRecord", "ControlRecord",
    "ControlType", "StartPayload", "FinishPayload", "SetMetadataPayload",
    "WPILog",
    "IncrementalBuffer",
    "WPILogParser", "parse_bytes", "read_log",
    "iter_bytes", "iter_file", "iter_tcp",
    "WPILogError", "MalformedHeader", "InvalidMagic", "UnsupportedVersion",
    "TruncatedHeader", "EndOfStream", "InvalidFieldWidth",
    "UnknownEntryReference", "UnknownControlType", "MalformedControlRecord",
    "PayloadTooLarge", "SourceError",
]
