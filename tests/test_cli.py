"""Test the wpilog command-line tool against a synthetic log file."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "python"))

import struct
import tempfile

import pytest

from wpilog.cli import main

from wpilog_build import LogBuilder


@pytest.fixture
def log_path():
    data = (LogBuilder(extra="match=Q12")
            .start(1, "/drive/speed", "double", timestamp=0)
            .start(2, "/events", "string", "{}", timestamp=0)
            .data(1, 1_000_000, struct.pack("<d", 1.0))
            .data(1, 1_020_000, struct.pack("<d", 2.0))
            .data(1, 1_040_000, struct.pack("<d", 3.0))
            .data(2, 1_500_000, b"auto start")
            .finish(2, timestamp=2_000_000)
            .to_bytes())
    with tempfile.NamedTemporaryFile(suffix=".wpilog", delete=False) as f:
        f.write(data)
        tmppath = f.name
    yield tmppath
    os.unlink(tmppath)


def test_dump(log_path, capsys):
    main(["dump", log_path])
    lines = capsys.readouterr().out.splitlines()
    assert len(lines) == 7
    assert lines[0].endswith("<control>: start entry=1 name='/drive/speed' type='double'")
    assert "/events: <10 bytes> 61 75 74 6f" in lines[5]
    assert lines[6].endswith("<control>: finish entry=2")


def test_dump_filtered(log_path, capsys):
    main(["--chunk-size", "5", "dump", log_path, "--entry", "/drive/speed"])
    lines = capsys.readouterr().out.splitlines()
    assert len(lines) == 3
    assert all("/drive/speed: <8 bytes>" in line for line in lines)
    assert lines[0].startswith("[    1.000000]")


def test_entries(log_path, capsys):
    main(["entries", log_path])
    out = capsys.readouterr().out
    assert "[  1] /drive/speed\n" in out
    assert "[  2] /events (finished)" in out
    assert "type=double records=3" in out
    assert "metadata={}" in out


def test_info(log_path, capsys):
    main(["info", log_path])
    out = capsys.readouterr().out
    assert "Version:    1.0" in out
    assert "Extra:      match=Q12" in out
    assert "Records:    4 data, 3 control" in out
    assert "Duration:   500.0ms" in out
    assert "20.0ms" in out


def test_info_counts_redeclared_entry(capsys):
    data = (LogBuilder()
            .start(1, "/clock", "int64")
            .data(1, 500, b"\x00")
            .data(1, 1000, b"\x01")
            .start(1, "/clock", "int64")
            .data(1, 2000, b"\x02")
            .to_bytes())
    with tempfile.NamedTemporaryFile(suffix=".wpilog", delete=False) as f:
        f.write(data)
        tmppath = f.name
    try:
        main(["info", tmppath])
        out = capsys.readouterr().out
        assert "Records:    3 data, 2 control" in out
        assert "Duration:   0us" in out
    finally:
        os.unlink(tmppath)


def test_info_signed_time_range(capsys):
    data = (LogBuilder()
            .start(1, "/clock", "int64")
            .data(1, (1 << 64) - 3, b"\x00", ts_len=8)
            .data(1, 1000, b"\x01")
            .to_bytes())
    with tempfile.NamedTemporaryFile(suffix=".wpilog", delete=False) as f:
        f.write(data)
        tmppath = f.name
    try:
        main(["info", tmppath])
        out = capsys.readouterr().out
        assert "Time range: -0.000003s - 0.001000s" in out
        assert "Duration:   1.0ms" in out
    finally:
        os.unlink(tmppath)


def test_corrupt_file_exits(capsys):
    with tempfile.NamedTemporaryFile(suffix=".wpilog", delete=False) as f:
        f.write(b"NOTLOG\x00\x01\x00\x00\x00\x00")
        tmppath = f.name
    try:
        with pytest.raises(SystemExit) as info:
            main(["entries", tmppath])
        assert info.value.code == 1
        assert "not a WPILOG file" in capsys.readouterr().err
    finally:
        os.unlink(tmppath)


if __name__ == "__main__":
    sys.exit(pytest.main([__file__]))
