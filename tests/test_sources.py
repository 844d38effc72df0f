"""Test byte-source adapters: memory, file and TCP."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "python"))

import asyncio
import struct
import tempfile

import pytest

from wpilog import WPILogParser, read_log
from wpilog.errors import EndOfStream, SourceError
from wpilog.sources import iter_bytes, iter_file, iter_tcp

from wpilog_build import LogBuilder


def _log_bytes():
    builder = LogBuilder(extra="tcp").start(1, "/sensor", "float")
    for i in range(50):
        builder.data(1, 1000 * i, struct.pack("<f", i / 2))
    return builder.finish(1, timestamp=60_000).to_bytes()


async def _collect(source):
    return [chunk async for chunk in source]


def test_iter_bytes_chunks():
    chunks = asyncio.run(_collect(iter_bytes(b"abcdefg", chunk_size=3)))
    assert chunks == [b"abc", b"def", b"g"]
    assert asyncio.run(_collect(iter_bytes(b""))) == []
    with pytest.raises(ValueError):
        asyncio.run(_collect(iter_bytes(b"x", chunk_size=0)))


def test_file_roundtrip():
    data = _log_bytes()
    with tempfile.NamedTemporaryFile(suffix=".wpilog", delete=False) as f:
        f.write(data)
        tmppath = f.name

    try:
        chunks = asyncio.run(_collect(iter_file(tmppath, chunk_size=100)))
        assert b"".join(chunks) == data

        log = read_log(tmppath, chunk_size=7)
        entry = log.entries[1]
        assert entry.name == "/sensor"
        assert entry.finished
        assert len(entry.records) == 50
        assert entry.records[-1].timestamp == 49_000
    finally:
        os.unlink(tmppath)


def test_missing_file_is_source_error():
    with pytest.raises(SourceError) as info:
        read_log(os.path.join(tempfile.gettempdir(), "no-such-file.wpilog"))
    assert isinstance(info.value.__cause__, FileNotFoundError)


def _serve(payload, close_early=False):
    async def handle(reader, writer):
        # Dribble the log out in small writes.
        end = len(payload) - 3 if close_early else len(payload)
        for i in range(0, end, 13):
            writer.write(payload[i:min(i + 13, end)])
            await writer.drain()
        writer.close()
        await writer.wait_closed()

    return asyncio.start_server(handle, "127.0.0.1", 0)


def test_tcp_stream():
    data = _log_bytes()

    async def run():
        server = await _serve(data)
        port = server.sockets[0].getsockname()[1]
        async with server:
            parser = WPILogParser(iter_tcp("127.0.0.1", port, chunk_size=16))
            return await parser.parse()

    log = asyncio.run(run())
    assert log.header.extra == "tcp"
    assert len(log.entries[1].records) == 50


def test_tcp_stream_closed_mid_record():
    data = _log_bytes()

    async def run():
        server = await _serve(data, close_early=True)
        port = server.sockets[0].getsockname()[1]
        async with server:
            parser = WPILogParser(iter_tcp("127.0.0.1", port))
            await parser.parse()

    with pytest.raises(EndOfStream):
        asyncio.run(run())


if __name__ == "__main__":
    sys.exit(pytest.main([__file__]))
