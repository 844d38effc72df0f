#!/usr/bin/env python3
"""Connect to a WPILOG TCP source and print records as they are decoded.

Run the replay server first:
    python examples/tcp_source.py robot.wpilog

Then in another terminal:
    python examples/tcp_client.py
"""

import asyncio

from wpilog import ControlRecord, WPILogParser, iter_tcp


async def main():
    parser = WPILogParser(iter_tcp("localhost", 4200, timeout=5.0))
    async for record in parser.records():
        if isinstance(record, ControlRecord):
            ctl = record.payload
            print(f"{ctl.type.name.lower()} entry={ctl.entry_id}")
            continue
        entry = parser.entries[record.entry_id]
        print(f"{record.timestamp / 1e6:.6f} {entry.name} "
              f"({entry.type}): {len(record.payload)} bytes")


try:
    asyncio.run(main())
except KeyboardInterrupt:
    pass
