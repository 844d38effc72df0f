"""Parsed WPILOG data model: header, entries and records."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Union

import numpy as np

CONTROL_ENTRY_ID = 0


class ControlType(IntEnum):
    START = 0
    FINISH = 1
    SET_METADATA = 2


@dataclass(frozen=True)
class Header:
    version: int  # major << 8 | minor
    extra: str = ""

    @property
    def major(self) -> int:
        return self.version >> 8

    @property
    def minor(self) -> int:
        return self.version & 0xFF


@dataclass(frozen=True)
class StartPayload:
    entry_id: int
    entry_name: str
    entry_type: str
    metadata: str
    type: ControlType = ControlType.START


@dataclass(frozen=True)
class FinishPayload:
    entry_id: int
    type: ControlType = ControlType.FINISH


@dataclass(frozen=True)
class SetMetadataPayload:
    entry_id: int
    metadata: str
    type: ControlType = ControlType.SET_METADATA


ControlPayload = Union[StartPayload, FinishPayload, SetMetadataPayload]


@dataclass(frozen=True)
class BaseRecord:
    entry_id: int
    timestamp: int  # microseconds
    raw_payload: bytes


@dataclass(frozen=True)
class DataRecord(BaseRecord):
    is_control = False

    @property
    def payload(self) -> bytes:
        return self.raw_payload


@dataclass(frozen=True)
class ControlRecord(BaseRecord):
    payload: ControlPayload
    is_control = True


@dataclass
class Entry:
    id: int
    name: str
    type: str
    metadata: str = ""
    records: list[DataRecord] = field(default_factory=list)
    finished: bool = False

    def timestamps_array(self) -> np.ndarray:
        """Record timestamps in stream order as an int64 array."""
        return np.fromiter((r.timestamp for r in self.records),
                           dtype=np.int64, count=len(self.records))


@dataclass
class WPILog:
    header: Header
    entries: dict[int, Entry] = field(default_factory=dict)
    control_records: list[ControlRecord] = field(default_factory=list)
    data_record_count: int = 0  # includes records of replaced entries

    def find_entry(self, name: str) -> Entry | None:
        for entry in self.entries.values():
            if entry.name == name:
                return entry
        return None
