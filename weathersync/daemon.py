"""Interval runner for the sync pipeline.

    python -m weathersync daemon                  # ops.sync_interval_minutes
    python -m weathersync daemon --interval 600
    python -m weathersync daemon --status
    python -m weathersync daemon --stop

The state file holds run counters and the last SyncResult so `--status`
can report without touching the database.
"""

import json
import logging
import os
import signal
import threading
import time
from datetime import UTC, datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path

from weathersync.models.sync import SyncResult, SyncState
from weathersync.pipeline.sync_pipeline import DEFAULT_DB, SyncPipeline

logger = logging.getLogger(__name__)

PID_DIR = Path("data")
PID_FILE = PID_DIR / "daemon.pid"
STATE_FILE = PID_DIR / "daemon_state.json"
LOG_DIR = Path("logs")
LOG_MAX_BYTES = 1_000_000
LOG_BACKUPS = 5
STOP_TIMEOUT_SECONDS = 60


def _read_pid() -> int | None:
    """PID from the PID file, or None if missing or unreadable."""
    try:
        return int(PID_FILE.read_text().strip())
    except (FileNotFoundError, ValueError):
        return None


def _is_alive(pid: int) -> bool:
    try:
        os.kill(pid, 0)
    except ProcessLookupError:
        return False
    except PermissionError:
        pass  # exists, owned by another user
    return True


def _summarize(result: SyncResult) -> dict:
    return {
        "run_id": result.run_id,
        "state": result.state.value,
        "error_kind": result.error_kind.value if result.error_kind else None,
        "records_stored": result.records_stored,
        "notified": result.notified,
        "finished_at": datetime.now(UTC).isoformat(),
    }


class SyncDaemon:
    """Calls `sync_weather()` once per interval until stopped.

    There is no backoff: a failed run is retried on the next tick.
    """

    def __init__(
        self,
        config_path: str | Path,
        db_path: str | Path = DEFAULT_DB,
        interval: int = 10800,
        pipeline: SyncPipeline | None = None,
    ):
        self.interval = interval
        self.pipeline = pipeline or SyncPipeline(config_path=config_path, db_path=db_path)
        self._stop = threading.Event()
        self._started_at: str | None = None
        self.runs = 0
        self.failures = 0
        self.last_run: dict | None = None

    def start(self) -> int:
        """Run until signalled. Returns a process exit code."""
        pid = _read_pid()
        if pid is not None and pid != os.getpid() and _is_alive(pid):
            print(f"Daemon already running (pid {pid}); stop it with `daemon --stop`")
            return 1

        PID_DIR.mkdir(parents=True, exist_ok=True)
        PID_FILE.write_text(str(os.getpid()))
        signal.signal(signal.SIGTERM, self._on_signal)
        signal.signal(signal.SIGINT, self._on_signal)
        handler = self._attach_log_file()
        self._started_at = datetime.now(UTC).isoformat()
        logger.info("Sync daemon started: pid=%d interval=%ds", os.getpid(), self.interval)
        print(f"Syncing every {self.interval}s (pid {os.getpid()}), logs in {LOG_DIR}/")

        try:
            self._loop()
        finally:
            PID_FILE.unlink(missing_ok=True)
            self._save_state()
            logger.info("Sync daemon stopped after %d runs, %d failed", self.runs, self.failures)
            logging.getLogger().removeHandler(handler)
            handler.close()
        return 0

    def stop(self) -> None:
        self._stop.set()

    def _on_signal(self, signum: int, frame: object) -> None:
        logger.info("Received %s, stopping after the current sync", signal.Signals(signum).name)
        self.stop()

    def _attach_log_file(self) -> logging.Handler:
        LOG_DIR.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(
            LOG_DIR / "sync.log", maxBytes=LOG_MAX_BYTES, backupCount=LOG_BACKUPS
        )
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        logging.getLogger().addHandler(handler)
        return handler

    def _loop(self) -> None:
        while not self._stop.is_set():
            tick = time.monotonic()
            self.run_once()
            self._save_state()
            self._stop.wait(max(0.0, self.interval - (time.monotonic() - tick)))

    def run_once(self) -> SyncResult | None:
        """One sync. Returns None if the pipeline itself raised."""
        self.runs += 1
        try:
            result = self.pipeline.sync_weather()
        except Exception:
            self.failures += 1
            self.last_run = None
            logger.exception("Sync #%d raised out of the pipeline", self.runs)
            return None

        self.last_run = _summarize(result)
        if result.state == SyncState.FAILED:
            self.failures += 1
            logger.error(
                "Sync #%d failed (%s): %s",
                self.runs, self.last_run["error_kind"], result.error_message,
            )
        else:
            logger.info(
                "Sync #%d %s: %d days stored, notified=%s",
                self.runs, result.state.value, result.records_stored, result.notified,
            )
        return result

    def _save_state(self) -> None:
        STATE_FILE.parent.mkdir(parents=True, exist_ok=True)
        STATE_FILE.write_text(json.dumps({
            "pid": os.getpid(),
            "started_at": self._started_at,
            "interval": self.interval,
            "runs": self.runs,
            "failures": self.failures,
            "last_run": self.last_run,
        }, indent=2))


def stop_daemon() -> int:
    """SIGTERM the running daemon, escalating to SIGKILL after a timeout."""
    if not PID_FILE.exists():
        print("No daemon running")
        return 1
    pid = _read_pid()
    if pid is None:
        print("Unreadable PID file, removing it")
        PID_FILE.unlink(missing_ok=True)
        return 1
    if not _is_alive(pid):
        print(f"Daemon not running (stale pid {pid}), cleaning up")
        PID_FILE.unlink(missing_ok=True)
        return 0

    os.kill(pid, signal.SIGTERM)
    deadline = time.monotonic() + STOP_TIMEOUT_SECONDS
    while time.monotonic() < deadline:
        if not _is_alive(pid):
            print(f"Daemon (pid {pid}) stopped")
            return 0
        time.sleep(0.5)

    print(f"Daemon (pid {pid}) ignored SIGTERM, killing it")
    os.kill(pid, signal.SIGKILL)
    PID_FILE.unlink(missing_ok=True)
    return 0


def daemon_status() -> int:
    """Print the daemon's last known state and its most recent run."""
    if not STATE_FILE.exists():
        print("No daemon state found")
        return 1

    state = json.loads(STATE_FILE.read_text())
    pid = state.get("pid")
    running = isinstance(pid, int) and _is_alive(pid)
    print(f"Daemon {'running' if running else 'stopped'} (pid {pid}, every {state.get('interval')}s)")
    print(f"  Runs: {state.get('runs', 0)}, failed: {state.get('failures', 0)}")

    last = state.get("last_run")
    if not last:
        print("  Last run: none")
        return 0
    detail = f" ({last['error_kind']})" if last.get("error_kind") else ""
    print(
        f"  Last run: {last['state']}{detail} at {last['finished_at']}, "
        f"{last['records_stored']} days stored, notified={last['notified']}"
    )
    return 0
