"""Tests for the refresh daemon."""

import json
import os
from unittest.mock import MagicMock, patch

import pytest

from heatshield.config.schema import HeatShieldConfig
from heatshield.daemon import (
    MAX_BACKOFF,
    RETRY_STEP_SECONDS,
    RefreshDaemon,
    daemon_status,
    stop_daemon,
)


@pytest.fixture
def tmp_data(tmp_path, monkeypatch):
    """Redirect PID/state files to temp directory."""
    pid_file = tmp_path / "daemon.pid"
    state_file = tmp_path / "daemon_state.json"
    monkeypatch.setattr("heatshield.daemon.PID_FILE", pid_file)
    monkeypatch.setattr("heatshield.daemon.PID_DIR", tmp_path)
    monkeypatch.setattr("heatshield.daemon.STATE_FILE", state_file)
    monkeypatch.setattr("heatshield.daemon.LOG_DIR", tmp_path / "logs")
    return {"pid": pid_file, "state": state_file, "dir": tmp_path}


@pytest.fixture
def config():
    return HeatShieldConfig()


class TestRefreshDaemon:
    def test_default_interval_from_config(self, config):
        daemon = RefreshDaemon(HeatShieldConfig(ops={"refresh_interval_minutes": 15}))
        assert daemon.interval == 900

    def test_explicit_interval(self, config):
        assert RefreshDaemon(config, interval=60).interval == 60

    def test_start_writes_state(self, tmp_data, config):
        daemon = RefreshDaemon(config, interval=1)
        with patch.object(daemon, "_loop"), patch.object(daemon, "_setup_signals"):
            daemon.start()
        assert tmp_data["state"].exists()
        assert not tmp_data["pid"].exists()

    def test_prevents_duplicate_start(self, tmp_data, config):
        tmp_data["pid"].write_text(str(os.getpid()))
        daemon = RefreshDaemon(config)
        with pytest.raises(SystemExit):
            daemon._check_not_already_running()

    def test_cleans_stale_pid(self, tmp_data, config):
        tmp_data["pid"].write_text("999999999")
        RefreshDaemon(config)._check_not_already_running()
        assert not tmp_data["pid"].exists()

    def test_saves_state(self, tmp_data, config):
        daemon = RefreshDaemon(config, interval=60)
        daemon._started_at = "2026-06-01T00:00:00+00:00"
        daemon.stats.total_cycles = 5
        daemon.stats.total_successes = 4
        daemon.stats.total_failures = 1

        daemon._save_state()

        state = json.loads(tmp_data["state"].read_text())
        assert state["total_cycles"] == 5
        assert state["total_successes"] == 4
        assert state["total_failures"] == 1
        assert state["interval"] == 60

    def test_run_one_cycle_success(self, tmp_data, config):
        daemon = RefreshDaemon(config, db_path=str(tmp_data["dir"] / "x.db"), interval=1)
        summary = MagicMock()
        summary.errors = []
        summary.temperature = 38
        summary.heat_index = "danger"
        summary.alert_scheduled = True
        summary.notifications_sent = 1
        with patch("heatshield.daemon.RefreshPipeline") as MockPipeline:
            MockPipeline.return_value.run.return_value = summary
            assert daemon._run_one_cycle() is True
        assert daemon.stats.total_successes == 1
        assert list((tmp_data["dir"] / "logs").glob("refresh_*.log"))

    def test_run_one_cycle_errors(self, tmp_data, config):
        daemon = RefreshDaemon(config, interval=1)
        summary = MagicMock()
        summary.errors = ["weather: network: down"]
        with patch("heatshield.daemon.RefreshPipeline") as MockPipeline:
            MockPipeline.return_value.run.return_value = summary
            assert daemon._run_one_cycle() is False
        assert daemon.stats.total_failures == 1

    def test_run_one_cycle_crash(self, tmp_data, config):
        daemon = RefreshDaemon(config, interval=1)
        with patch("heatshield.daemon.RefreshPipeline") as MockPipeline:
            MockPipeline.return_value.run.side_effect = RuntimeError("boom")
            assert daemon._run_one_cycle() is False
        assert daemon.stats.total_failures == 1

    def test_backoff(self, config):
        daemon = RefreshDaemon(config, interval=1800)
        waits = [daemon._next_wait(False) for _ in range(6)]
        assert waits == [60, 120, 240, 480, MAX_BACKOFF, MAX_BACKOFF]
        assert daemon.stats.consecutive_failures == 6
        assert daemon._next_wait(True) == 1800
        assert daemon.stats.consecutive_failures == 0

    def test_backoff_independent_of_interval(self, config):
        daemon = RefreshDaemon(config, interval=10)
        assert daemon._next_wait(False) == RETRY_STEP_SECONDS

    def test_log_rotation(self, tmp_data, config):
        daemon = RefreshDaemon(config)
        log_dir = tmp_data["dir"] / "logs"
        log_dir.mkdir()
        for i in range(110):
            (log_dir / f"refresh_{i:04d}.log").write_text(f"log {i}")

        daemon._rotate_logs()

        remaining = sorted(log_dir.glob("refresh_*.log"))
        assert len(remaining) == 100
        assert remaining[0].name == "refresh_0010.log"

    def test_cleanup_removes_pid(self, tmp_data, config):
        daemon = RefreshDaemon(config)
        daemon._write_pid()
        assert tmp_data["pid"].exists()
        daemon._cleanup()
        assert not tmp_data["pid"].exists()


class TestDaemonControl:
    def test_stop_no_daemon(self, tmp_data):
        assert stop_daemon() == 1

    def test_stop_stale_pid(self, tmp_data):
        tmp_data["pid"].write_text("999999999")
        assert stop_daemon() == 0
        assert not tmp_data["pid"].exists()

    def test_stop_corrupt_pid(self, tmp_data):
        tmp_data["pid"].write_text("not-a-pid")
        assert stop_daemon() == 1

    def test_status_no_state(self, tmp_data):
        assert daemon_status() == 1

    def test_status_with_state(self, tmp_data, capsys):
        state = {
            "pid": 999999999,
            "started_at": "2026-06-01T00:00:00+00:00",
            "interval": 1800,
            "total_cycles": 12,
            "total_successes": 11,
            "total_failures": 1,
            "consecutive_failures": 0,
            "last_update": "2026-06-01T06:00:00+00:00",
        }
        tmp_data["state"].write_text(json.dumps(state))

        assert daemon_status() == 0
        out = capsys.readouterr().out
        assert "1800s" in out
        assert "Total cycles: 12" in out
        assert "stopped" in out
