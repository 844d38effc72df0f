"""wpilog command-line tool."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys

import numpy as np

from .decoder import WPILogParser, read_log
from .errors import WPILogError
from .records import ControlRecord, DataRecord, Entry, StartPayload
from .sources import DEFAULT_CHUNK_SIZE

_PREVIEW_BYTES = 16


def _format_record(record: DataRecord | ControlRecord,
                   entries: dict[int, Entry]) -> str:
    ts_s = record.timestamp / 1_000_000
    if isinstance(record, ControlRecord):
        ctl = record.payload
        detail = f"{ctl.type.name.lower()} entry={ctl.entry_id}"
        if isinstance(ctl, StartPayload):
            detail += f" name={ctl.entry_name!r} type={ctl.entry_type!r}"
        return f"[{ts_s:12.6f}] <control>: {detail}"

    entry = entries.get(record.entry_id)
    name = entry.name if entry else f"id={record.entry_id}"
    preview = record.payload[:_PREVIEW_BYTES].hex(" ")
    if len(record.payload) > _PREVIEW_BYTES:
        preview += " ..."
    return f"[{ts_s:12.6f}] {name}: <{len(record.payload)} bytes> {preview}"


async def _dump(path: str, chunk_size: int, entry_name: str | None) -> None:
    parser = WPILogParser.from_file(path, chunk_size)
    async for record in parser.records():
        if entry_name is not None:
            entry = parser.entries.get(record.entry_id)
            if entry is None or entry.name != entry_name:
                continue
        print(_format_record(record, parser.entries))


def cmd_dump(args: argparse.Namespace) -> None:
    """Dump every record of a log file to stdout, in stream order."""
    asyncio.run(_dump(args.file, args.chunk_size, args.entry))


def cmd_entries(args: argparse.Namespace) -> None:
    """Print the entry table of a log file."""
    log = read_log(args.file, args.chunk_size)
    for e in log.entries.values():
        state = " (finished)" if e.finished else ""
        print(f"[{e.id:3d}] {e.name}{state}")
        print(f"      type={e.type} records={len(e.records)}")
        if e.metadata:
            print(f"      metadata={e.metadata}")
        print()


def _format_duration(us: int) -> str:
    """Format a microsecond duration as a human-readable string."""
    if us < 1_000:
        return f"{us}us"
    if us < 1_000_000:
        return f"{us / 1_000:.1f}ms"
    s = us / 1_000_000
    if s < 60:
        return f"{s:.2f}s"
    if s < 3600:
        return f"{s / 60:.1f}m"
    return f"{s / 3600:.1f}h"


def _mean_period(ts: np.ndarray) -> str:
    if len(ts) < 2:
        return "-"
    return _format_duration(int(np.mean(np.diff(ts))))


def cmd_info(args: argparse.Namespace) -> None:
    """Print summary info about a .wpilog file."""
    file_size = os.path.getsize(args.file)
    log = read_log(args.file, args.chunk_size)

    per_entry = {e.id: e.timestamps_array() for e in log.entries.values()}
    nonempty = [ts for ts in per_entry.values() if len(ts)]
    total = log.data_record_count

    print(f"File:       {args.file}")
    print(f"Size:       {file_size:,} bytes")
    print(f"Version:    {log.header.major}.{log.header.minor}")
    if log.header.extra:
        print(f"Extra:      {log.header.extra}")
    print(f"Records:    {total:,} data, {len(log.control_records):,} control")

    if nonempty:
        ts_min = int(min(ts.min() for ts in nonempty))
        ts_max = int(max(ts.max() for ts in nonempty))
        print(f"Time range: {ts_min / 1e6:.6f}s - {ts_max / 1e6:.6f}s")
        print(f"Duration:   {_format_duration(ts_max - ts_min)}")
    else:
        print("Time range: (empty)")

    print(f"\nEntries ({len(log.entries)}):")
    print(f"  {'ID':>4s}  {'Name':<32s}  {'Type':<12s}  {'Samples':>8s}  Period")
    print(f"  {'-' * 4}  {'-' * 32}  {'-' * 12}  {'-' * 8}  {'-' * 8}")
    for e in log.entries.values():
        ts = per_entry[e.id]
        print(f"  {e.id:4d}  {e.name:<32s}  {e.type:<12s}  {len(ts):8,}  "
              f"{_mean_period(ts)}")


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog="wpilog", description="WPILOG decoding tool")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Enable debug logging")
    parser.add_argument("--chunk-size", type=int, default=DEFAULT_CHUNK_SIZE,
                        help="Bytes read from the file per chunk")
    sub = parser.add_subparsers(dest="command")

    # dump
    p_dump = sub.add_parser("dump", help="Dump the records of a log file")
    p_dump.add_argument("file", help="Path to .wpilog file")
    p_dump.add_argument("--entry", help="Only show records for this entry name")

    # entries
    p_entries = sub.add_parser("entries", help="Show the entry table")
    p_entries.add_argument("file", help="Path to .wpilog file")

    # info
    p_info = sub.add_parser("info", help="Show summary info about a log file")
    p_info.add_argument("file", help="Path to .wpilog file")

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    commands = {"dump": cmd_dump, "entries": cmd_entries, "info": cmd_info}
    handler = commands.get(args.command)
    if handler is None:
        parser.print_help()
        return

    try:
        handler(args)
    except (WPILogError, OSError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
