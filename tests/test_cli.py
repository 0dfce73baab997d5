"""Tests for the CLI."""

import io
import json

import click
from click.testing import CliRunner
from rich.console import Console

from bytestat.cli import main
from bytestat.monitor import StreamMonitor


class TestCLI:
    def test_version(self):
        r = CliRunner().invoke(main, ["--version"])
        assert r.exit_code == 0
        assert "0.1.0" in r.output

    def test_score_stdin(self):
        r = CliRunner().invoke(main, ["score"], input=bytes([5]))
        assert r.exit_code == 0
        assert "RAW SCORES AS STRING" in r.output
        assert "1 samples" in r.output
        assert r.output.rstrip().endswith("~0%")

    def test_score_file(self, tmp_path):
        path = tmp_path / "cycle.bin"
        path.write_bytes(bytes(range(256)) * 100)
        r = CliRunner().invoke(main, ["score", str(path), "--chunk-size", "1000"])
        assert r.exit_code == 0
        assert "25600 samples" in r.output

    def test_score_separator(self):
        r = CliRunner().invoke(main, ["score", "--separator", ","], input=bytes([5]))
        assert r.exit_code == 0
        assert "0.00390625,0.00390625,0,0.001953125,0.001953125,0.234375" in r.output

    def test_separator_from_env(self):
        r = CliRunner().invoke(
            main, ["score"], input=bytes([5]), env={"BYTESTAT_SCORE_SEPARATOR": ";"}
        )
        assert r.exit_code == 0
        assert "0.00390625;0.00390625;0;" in r.output

    def test_score_json(self):
        r = CliRunner().invoke(main, ["score", "--format", "json"], input=b"\x00" * 64)
        assert r.exit_code == 0
        d = json.loads(r.output)
        assert d["samples"] == 64
        assert d["scores"]["coverage"] == 1 / 256
        assert d["percent"] == "~0%"

    def test_missing_file(self):
        r = CliRunner().invoke(main, ["score", "/nonexistent/bytes.bin"])
        assert r.exit_code != 0

    def test_monitor(self, tmp_path):
        path = tmp_path / "data.bin"
        path.write_bytes(bytes(range(256)) * 8)
        r = CliRunner().invoke(main, ["monitor", str(path), "--refresh", "0.05"])
        assert r.exit_code == 0
        assert "Total bytes: 2,048" in r.output

    def test_monitor_limit(self, tmp_path):
        path = tmp_path / "data.bin"
        path.write_bytes(bytes(5000))
        r = CliRunner().invoke(
            main, ["monitor", str(path), "--refresh", "0.05", "--limit", "1000", "--chunk-size", "300"]
        )
        assert r.exit_code == 0
        assert "Total bytes: 1,000" in r.output


class _FailingStream:
    """Returns one chunk, then fails like a disconnected device."""

    def __init__(self, chunk: bytes):
        self._chunk = chunk

    def read(self, n: int = -1) -> bytes:
        if self._chunk is None:
            raise OSError("device disconnected")
        chunk, self._chunk = self._chunk, None
        return chunk


class TestReadErrors:
    def test_score_reports_partial(self, monkeypatch):
        monkeypatch.setattr(
            click.File, "convert", lambda self, value, param, ctx: _FailingStream(bytes([5]) * 1000)
        )
        r = CliRunner().invoke(main, ["score", "device.bin"])
        assert r.exit_code == 1
        assert "Error reading input after 1,000 bytes: device disconnected" in r.output
        assert "1000 samples" in r.output
        assert "RAW SCORES AS STRING" in r.output

    def test_monitor_exit_code(self, monkeypatch):
        monkeypatch.setattr(
            click.File, "convert", lambda self, value, param, ctx: _FailingStream(bytes(500))
        )
        r = CliRunner().invoke(main, ["monitor", "device.bin", "--refresh", "0.05"])
        assert r.exit_code == 1
        assert "Total bytes: 500" in r.output
        assert "Error reading input: device disconnected" in r.output

    def test_monitor_records_error(self):
        mon = StreamMonitor(
            _FailingStream(bytes(range(256))),
            refresh_rate=0.05,
            console=Console(file=io.StringIO()),
        )
        stats = mon.run()
        assert isinstance(mon.error, OSError)
        assert stats.samples == 256
        assert stats.score_coverage() == 1.0
