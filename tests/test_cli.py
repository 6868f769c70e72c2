"""Tests for CLI commands."""

from __future__ import annotations

import json
from datetime import timedelta
from pathlib import Path
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from pomodoro.cli import app
from pomodoro.events import HostStartError
from pomodoro.models import TimerSnapshot, TimerStatus

runner = CliRunner()


@pytest.fixture(autouse=True)
def _use_tmp_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Point every CLI test at a config file under tmp_path."""
    cfg_file = tmp_path / "config.json"
    monkeypatch.setenv("POMODORO_CONFIG", str(cfg_file))
    return cfg_file


def _done() -> TimerSnapshot:
    return TimerSnapshot(status=TimerStatus.IDLE, remaining=timedelta(minutes=25), quitting=True)


class TestRun:
    @patch("pomodoro.timer.run_timer")
    def test_defaults(self, mock_run) -> None:
        mock_run.return_value = _done()
        result = runner.invoke(app, ["run"])
        assert result.exit_code == 0
        config = mock_run.call_args.args[0]
        assert config.work_duration == timedelta(minutes=25)
        assert config.break_duration == timedelta(minutes=5)
        assert config.interval == timedelta(milliseconds=100)

    @patch("pomodoro.timer.run_timer")
    def test_overrides(self, mock_run) -> None:
        mock_run.return_value = _done()
        result = runner.invoke(app, ["run", "-w", "50", "-b", "10", "--interval-ms", "1"])
        assert result.exit_code == 0
        config = mock_run.call_args.args[0]
        assert config.work_duration == timedelta(minutes=50)
        assert config.break_duration == timedelta(minutes=10)
        assert config.interval == timedelta(milliseconds=1)

    @patch("pomodoro.timer.run_timer")
    def test_reads_config_file(self, mock_run, _use_tmp_config: Path) -> None:
        _use_tmp_config.write_text(json.dumps({"work_minutes": 45}))
        mock_run.return_value = _done()
        result = runner.invoke(app, ["run"])
        assert result.exit_code == 0
        assert mock_run.call_args.args[0].work_duration == timedelta(minutes=45)

    @patch("pomodoro.timer.run_timer")
    def test_invalid_duration(self, mock_run) -> None:
        result = runner.invoke(app, ["run", "--work", "0"])
        assert result.exit_code == 2
        assert "invalid settings" in result.output
        mock_run.assert_not_called()

    @patch("pomodoro.timer.run_timer", side_effect=HostStartError("stdin is not a terminal"))
    def test_host_failure_exits_nonzero(self, mock_run) -> None:
        result = runner.invoke(app, ["run"])
        assert result.exit_code == 1
        assert "Error: stdin is not a terminal" in result.output

    @patch("pomodoro.timer.run_timer")
    def test_log_file(self, mock_run, tmp_path: Path) -> None:
        mock_run.return_value = _done()
        log_file = tmp_path / "pomodoro.log"
        with patch("pomodoro.cli.logging.basicConfig") as mock_basic:
            result = runner.invoke(app, ["run", "--log-file", str(log_file), "-v"])
        assert result.exit_code == 0
        kwargs = mock_basic.call_args.kwargs
        assert kwargs["filename"] == str(log_file)
        assert kwargs["level"] == 10


class TestKeys:
    def test_lists_bindings(self) -> None:
        result = runner.invoke(app, ["keys"])
        assert result.exit_code == 0
        assert "Start" in result.output
        assert "Restart the timer" in result.output
        assert "ctrl+c" in result.output


class TestConfig:
    def test_show_default(self) -> None:
        result = runner.invoke(app, ["config", "--show"])
        assert result.exit_code == 0
        assert "Work: 25 min" in result.output
        assert "defaults" in result.output

    def test_show_file(self, _use_tmp_config: Path) -> None:
        _use_tmp_config.write_text(json.dumps({"break_minutes": 7}))
        result = runner.invoke(app, ["config", "--show"])
        assert result.exit_code == 0
        assert "Break: 7 min" in result.output

    def test_no_flags(self) -> None:
        result = runner.invoke(app, ["config"])
        assert result.exit_code == 0
        assert "--show" in result.output


class TestNoArgs:
    def test_shows_help(self) -> None:
        result = runner.invoke(app, [])
        assert "run" in result.output
