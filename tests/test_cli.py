"""Tests for the daylog CLI.

Uses typer.testing.CliRunner for isolated CLI testing.
"""

from __future__ import annotations

import json
from datetime import date
from pathlib import Path

from typer.testing import CliRunner

from daylog.cli import app
from daylog.naming import date_stamp
from daylog.sink import LogSink

runner = CliRunner()


def _today(seq: int) -> str:
    return f"{date_stamp(date.today())}{seq:04d}.log"


# =========================================================================
# App structure
# =========================================================================


class TestAppStructure:
    def test_help_lists_commands(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        for cmd in ("next", "files", "write", "parse"):
            assert cmd in result.output


# =========================================================================
# next
# =========================================================================


class TestNext:
    def test_missing_directory(self, tmp_path):
        result = runner.invoke(app, ["next", "--dir", str(tmp_path / "logs")])
        assert result.exit_code == 0
        assert result.output.strip().endswith(_today(1))
        assert not (tmp_path / "logs").exists()

    def test_after_existing(self, log_dir):
        log_dir.mkdir()
        (log_dir / _today(4)).write_text("")
        result = runner.invoke(app, ["next", "--dir", str(log_dir)])
        assert result.exit_code == 0
        assert result.output.strip().endswith(_today(5))

    def test_exhausted(self, log_dir):
        log_dir.mkdir()
        (log_dir / _today(9999)).write_text("")
        result = runner.invoke(app, ["next", "--dir", str(log_dir)])
        assert result.exit_code == 1
        assert "Error:" in result.output

    def test_not_a_directory(self, log_dir):
        log_dir.write_text("")
        result = runner.invoke(app, ["next", "--dir", str(log_dir)])
        assert result.exit_code == 1
        assert "not a directory" in result.output

    def test_listing_fails(self, log_dir, monkeypatch):
        log_dir.mkdir()

        def _denied(self):
            raise PermissionError(13, "Permission denied")

        monkeypatch.setattr(Path, "iterdir", _denied)
        result = runner.invoke(app, ["next", "--dir", str(log_dir)])
        assert result.exit_code == 1
        assert "could not list entries" in result.output


# =========================================================================
# files
# =========================================================================


class TestFiles:
    def test_no_files(self, log_dir):
        result = runner.invoke(app, ["files", "--dir", str(log_dir)])
        assert result.exit_code == 0
        assert "No log files found." in result.output

    def test_today_only(self, log_dir):
        log_dir.mkdir()
        (log_dir / _today(1)).write_text("abc")
        (log_dir / "2001_01_01_0001.log").write_text("")
        result = runner.invoke(app, ["files", "--dir", str(log_dir)])
        assert result.exit_code == 0
        assert _today(1) in result.output
        assert "2001_01_01_0001.log" not in result.output
        assert "3 bytes" in result.output

    def test_all_days(self, log_dir):
        log_dir.mkdir()
        (log_dir / _today(1)).write_text("")
        (log_dir / "2001_01_01_0001.log").write_text("")
        result = runner.invoke(app, ["files", "--all", "--dir", str(log_dir)])
        assert result.exit_code == 0
        lines = result.output.strip().splitlines()
        assert lines[0].startswith("2001_01_01_0001.log")
        assert lines[1].startswith(_today(1))


# =========================================================================
# write
# =========================================================================


class TestWrite:
    def test_write_creates_file(self, log_dir):
        result = runner.invoke(app, ["write", "warning", "low disk", "--dir", str(log_dir)])
        assert result.exit_code == 0
        path = log_dir / _today(1)
        assert result.output.strip() == str(path)
        content = path.read_text()
        assert content.startswith("WARNING : [")
        assert content.endswith("] : low disk\n")
        assert "| write |" in content

    def test_each_write_is_a_new_file(self, log_dir):
        runner.invoke(app, ["write", "info", "one", "--dir", str(log_dir)])
        runner.invoke(app, ["write", "info", "two", "--dir", str(log_dir)])
        assert (log_dir / _today(2)).read_text().endswith(": two\n")

    def test_unknown_level(self, log_dir):
        result = runner.invoke(app, ["write", "verbose", "x", "--dir", str(log_dir)])
        assert result.exit_code == 1
        assert "Unknown level" in result.output
        assert not log_dir.exists()

    def test_dir_from_env(self, tmp_path, monkeypatch):
        monkeypatch.setenv("DAYLOG_DIR", str(tmp_path / "envlogs"))
        result = runner.invoke(app, ["write", "info", "hi"])
        assert result.exit_code == 0
        assert (tmp_path / "envlogs" / _today(1)).exists()

    def test_sink_error(self, log_dir):
        log_dir.write_text("")
        result = runner.invoke(app, ["write", "info", "x", "--dir", str(log_dir)])
        assert result.exit_code == 1
        assert "Error: Could not create log directory" in result.output


# =========================================================================
# parse
# =========================================================================


class TestParse:
    def _log(self, tmp_path, *lines):
        path = tmp_path / "2025_06_01_0001.log"
        path.write_text("".join(lines))
        return path

    def test_text_output(self, tmp_path):
        path = self._log(tmp_path, "INFO : [10:00:00 | main.py | run | 3] : ready\n")
        result = runner.invoke(app, ["parse", str(path)])
        assert result.exit_code == 0
        assert "main.py:run:3" in result.output
        assert "ready" in result.output

    def test_json_output(self, tmp_path):
        path = self._log(
            tmp_path,
            "INFO : [10:00:00 | main.py | run | 3] : ready\n",
            "FATAL : [10:00:01 | gpu.py | init | 9] : no device\n",
        )
        result = runner.invoke(app, ["parse", "--json", str(path)])
        assert result.exit_code == 0
        records = [json.loads(line) for line in result.output.strip().splitlines()]
        assert records[1] == {
            "level": "FATAL",
            "time": "10:00:01",
            "file": "gpu.py",
            "function": "init",
            "line": 9,
            "message": "no device",
        }

    def test_multiline_message(self, config, clock):
        with LogSink.open(config, clock=clock) as sink:
            sink.error("traceback:\n  line 1\n  line 2")
        result = runner.invoke(app, ["parse", "--json", str(sink.path)])
        assert result.exit_code == 0
        records = [json.loads(line) for line in result.output.strip().splitlines()]
        assert len(records) == 1
        assert records[0]["message"] == "traceback:\n  line 1\n  line 2"

    def test_malformed_lines(self, tmp_path):
        path = self._log(
            tmp_path,
            "INFO : [10:00:00 | main.py | run | 3] : ok\n",
            "garbage\n",
        )
        result = runner.invoke(app, ["parse", str(path)])
        assert result.exit_code == 1
        assert "ok" in result.output
        assert ":2:" in result.output

    def test_missing_file(self, tmp_path):
        result = runner.invoke(app, ["parse", str(tmp_path / "nope.log")])
        assert result.exit_code != 0
