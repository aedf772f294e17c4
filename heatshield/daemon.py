"""Refresh daemon: runs the refresh pipeline on a fixed interval.

Each cycle fetches weather, evaluates the heat alert and dispatches due
notifications and reminders. Stats go to a JSON state file so
``heatshield daemon --status`` can report on a running daemon.

Usage:
    heatshield daemon                 # every 30 minutes (config default)
    heatshield daemon --interval 600  # every 10 minutes
    heatshield daemon --stop
    heatshield daemon --status
"""

import json
import logging
import os
import signal
import sys
import time
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import asdict, dataclass
from datetime import UTC, datetime
from pathlib import Path

from heatshield.config.schema import HeatShieldConfig
from heatshield.pipeline.refresh_pipeline import RefreshPipeline

logger = logging.getLogger(__name__)

RETRY_STEP_SECONDS = 60
MAX_BACKOFF = 600
STOP_TIMEOUT_SECONDS = 60
PID_DIR = Path("data")
PID_FILE = PID_DIR / "daemon.pid"
STATE_FILE = PID_DIR / "daemon_state.json"
LOG_DIR = Path("logs")
MAX_LOG_FILES = 100

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass
class CycleStats:
    total_cycles: int = 0
    total_successes: int = 0
    total_failures: int = 0
    consecutive_failures: int = 0


def _read_pid() -> int | None:
    """PID from the PID file, or None when it is missing or unreadable."""
    try:
        return int(PID_FILE.read_text().strip())
    except (FileNotFoundError, ValueError):
        return None


def _pid_alive(pid: int) -> bool:
    try:
        os.kill(pid, 0)
    except ProcessLookupError:
        return False
    except PermissionError:
        # exists, owned by someone else
        return True
    return True


@contextmanager
def _cycle_log(path: Path) -> Iterator[None]:
    """Mirror root logging into ``path`` for the duration of one cycle."""
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(path)
    handler.setLevel(logging.INFO)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root = logging.getLogger()
    root.addHandler(handler)
    try:
        yield
    finally:
        root.removeHandler(handler)
        handler.close()


class RefreshDaemon:
    """Loops the refresh pipeline with backoff, log rotation and signal handling."""

    def __init__(
        self,
        config: HeatShieldConfig,
        db_path: str = "data/heatshield.db",
        interval: int | None = None,
    ):
        self.config = config
        self.db_path = db_path
        self.interval = interval or config.ops.refresh_interval_minutes * 60
        self.stats = CycleStats()
        self._running = False
        self._started_at: str | None = None

    def start(self) -> None:
        self._check_not_already_running()
        self._write_pid()
        self._setup_signals()
        self._running = True
        self._started_at = datetime.now(UTC).isoformat()

        logger.info("Daemon started, interval=%ds pid=%d", self.interval, os.getpid())
        print(f"🔄 Refresh daemon started (pid {os.getpid()}, every {self.interval}s)")
        print(f"   cycle logs in {LOG_DIR}/, stop with: heatshield daemon --stop")

        try:
            self._loop()
        except KeyboardInterrupt:
            logger.info("Keyboard interrupt, shutting down")
        finally:
            self._cleanup()

    def _loop(self) -> None:
        while self._running:
            deadline = time.monotonic() + self._next_wait(self._run_one_cycle())
            self._save_state()
            # 1 s steps keep SIGTERM responsive
            while self._running and time.monotonic() < deadline:
                time.sleep(1)

    def _next_wait(self, success: bool) -> int:
        """Seconds until the next cycle.

        After a success this is the interval. After the n-th consecutive failure it
        is RETRY_STEP_SECONDS * 2**(n-1), capped at MAX_BACKOFF, regardless of the
        interval.
        """
        if success:
            self.stats.consecutive_failures = 0
            return self.interval
        self.stats.consecutive_failures += 1
        wait = min(RETRY_STEP_SECONDS * 2 ** (self.stats.consecutive_failures - 1), MAX_BACKOFF)
        logger.warning(
            "Refresh failed (%d consecutive), backing off %ds",
            self.stats.consecutive_failures, wait,
        )
        return wait

    def _run_one_cycle(self) -> bool:
        """Run one refresh with its own log file. Returns True when it had no errors."""
        self.stats.total_cycles += 1
        cycle = self.stats.total_cycles
        stamp = datetime.now(UTC).strftime("%Y%m%dT%H%M%SZ")

        with _cycle_log(LOG_DIR / f"refresh_{stamp}.log"):
            ok = self._refresh(cycle)
        self._rotate_logs()

        if ok:
            self.stats.total_successes += 1
        else:
            self.stats.total_failures += 1
        return ok

    def _refresh(self, cycle: int) -> bool:
        logger.info("=== Refresh #%d starting ===", cycle)
        try:
            summary = RefreshPipeline(self.config, self.db_path).run()
        except Exception:
            logger.exception("Refresh #%d crashed", cycle)
            return False

        if summary.errors:
            logger.error("Refresh #%d completed with errors: %s", cycle, summary.errors)
            return False
        logger.info(
            "Refresh #%d OK: %s°C %s, alert=%s, %d notifications sent",
            cycle,
            summary.temperature,
            summary.heat_index,
            summary.alert_scheduled,
            summary.notifications_sent,
        )
        return True

    def _rotate_logs(self) -> None:
        """Delete all but the newest MAX_LOG_FILES cycle logs."""
        logs = sorted(LOG_DIR.glob("refresh_*.log")) if LOG_DIR.exists() else []
        for old in logs[:-MAX_LOG_FILES]:
            old.unlink(missing_ok=True)

    def _setup_signals(self) -> None:
        def _stop(signum: int, frame: object) -> None:
            name = signal.Signals(signum).name
            logger.info("Received %s, stopping after the current cycle", name)
            print(f"\n⏹️  Received {name}, finishing current cycle...")
            self._running = False

        for sig in (signal.SIGTERM, signal.SIGINT):
            signal.signal(sig, _stop)

    def _check_not_already_running(self) -> None:
        if not PID_FILE.exists():
            return
        pid = _read_pid()
        if pid is None or not _pid_alive(pid):
            logger.info("Removing stale PID file %s", PID_FILE)
            PID_FILE.unlink(missing_ok=True)
            return
        print(f"❌ Another daemon is active (pid {pid}); run `heatshield daemon --stop` first")
        sys.exit(1)

    def _write_pid(self) -> None:
        PID_DIR.mkdir(parents=True, exist_ok=True)
        PID_FILE.write_text(str(os.getpid()))

    def _save_state(self) -> None:
        PID_DIR.mkdir(parents=True, exist_ok=True)
        snapshot = asdict(self.stats)
        snapshot.update(
            pid=os.getpid(),
            started_at=self._started_at,
            interval=self.interval,
            last_update=datetime.now(UTC).isoformat(),
        )
        STATE_FILE.write_text(json.dumps(snapshot, indent=2))

    def _cleanup(self) -> None:
        PID_FILE.unlink(missing_ok=True)
        self._save_state()
        s = self.stats
        logger.info(
            "Daemon stopped: %d cycles (%d ok, %d failed)",
            s.total_cycles, s.total_successes, s.total_failures,
        )
        print(
            f"⏹️  Daemon stopped: {s.total_cycles} cycles "
            f"({s.total_successes} ok, {s.total_failures} failed)"
        )


def _wait_for_exit(pid: int, timeout: int) -> bool:
    for _ in range(timeout):
        time.sleep(1)
        if not _pid_alive(pid):
            return True
    return False


def stop_daemon() -> int:
    """SIGTERM the running daemon, escalating to SIGKILL after a minute."""
    if not PID_FILE.exists():
        print(f"Nothing to stop: {PID_FILE} does not exist")
        return 1

    pid = _read_pid()
    if pid is None:
        print(f"Unreadable PID file {PID_FILE}, deleting it")
        PID_FILE.unlink(missing_ok=True)
        return 1

    if not _pid_alive(pid):
        print(f"pid {pid} is gone, removing leftover daemon files")
        for leftover in (PID_FILE, STATE_FILE):
            leftover.unlink(missing_ok=True)
        return 0

    print(f"Sending SIGTERM to pid {pid}...")
    os.kill(pid, signal.SIGTERM)
    if _wait_for_exit(pid, STOP_TIMEOUT_SECONDS):
        print("✅ Daemon exited")
    else:
        print(f"⚠️  Daemon didn't stop in {STOP_TIMEOUT_SECONDS}s, sending SIGKILL")
        os.kill(pid, signal.SIGKILL)
    PID_FILE.unlink(missing_ok=True)
    return 0


_STATUS_FIELDS = [
    ("PID", "pid", "?"),
    ("Interval", "interval", "?"),
    ("Started", "started_at", "?"),
    ("Total cycles", "total_cycles", 0),
    ("Successes", "total_successes", 0),
    ("Failures", "total_failures", 0),
    ("Consecutive failures", "consecutive_failures", 0),
    ("Last update", "last_update", "?"),
]


def daemon_status() -> int:
    """Print daemon status from the state file."""
    if not STATE_FILE.exists():
        print(f"🔴 No state file at {STATE_FILE}")
        pid = _read_pid()
        if pid is not None and _pid_alive(pid):
            print(f"   pid {pid} is alive but has not written state yet")
        elif PID_FILE.exists():
            print(f"   {PID_FILE} is stale")
        return 1

    snapshot = json.loads(STATE_FILE.read_text())
    pid = snapshot.get("pid")
    running = isinstance(pid, int) and _pid_alive(pid)

    print(f"{'🟢' if running else '🔴'} Daemon {'running' if running else 'stopped'}")
    for label, key, default in _STATUS_FIELDS:
        value = snapshot.get(key, default)
        suffix = "s" if key == "interval" and value != "?" else ""
        print(f"  {label}: {value}{suffix}")
    return 0
