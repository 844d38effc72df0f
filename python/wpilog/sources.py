"""Async byte sources for WPILogParser.

Any ``AsyncIterable[bytes]`` works as a source; these cover the common
cases.  Chunk boundaries carry no meaning to the parser.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import AsyncIterator

DEFAULT_CHUNK_SIZE = 65536


async def iter_bytes(data: bytes,
                     chunk_size: int = DEFAULT_CHUNK_SIZE) -> AsyncIterator[bytes]:
    """Yield an in-memory buffer in *chunk_size* slices."""
    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")
    view = memoryview(data)
    for start in range(0, len(view), chunk_size):
        yield bytes(view[start:start + chunk_size])


async def iter_file(path: str | Path,
                    chunk_size: int = DEFAULT_CHUNK_SIZE) -> AsyncIterator[bytes]:
    """Read a file in a worker thread, one chunk per await."""
    f = await asyncio.to_thread(open, path, "rb")
    try:
        while True:
            chunk = await asyncio.to_thread(f.read, chunk_size)
            if not chunk:
                break
            yield chunk
    finally:
        f.close()


async def iter_tcp(host: str, port: int,
                   chunk_size: int = DEFAULT_CHUNK_SIZE,
                   timeout: float | None = 5.0) -> AsyncIterator[bytes]:
    """Read a WPILOG stream from a TCP connection until the peer closes."""
    reader, writer = await asyncio.wait_for(
        asyncio.open_connection(host, port), timeout)
    try:
        while True:
            chunk = await asyncio.wait_for(reader.read(chunk_size), timeout)
            if not chunk:
                break
            yield chunk
    finally:
        writer.close()
        await writer.wait_closed()
