"""Scheduler process that runs one flood check per cron fire time.

Usage:
    python -m floodcheck daemon --config ops/configs/default.yaml
    python -m floodcheck daemon --status
    python -m floodcheck daemon --stop
"""

import json
import logging
import os
import signal
import sys
import threading
import time
from contextlib import contextmanager
from datetime import UTC, datetime
from pathlib import Path
from zoneinfo import ZoneInfo

from apscheduler.triggers.cron import CronTrigger

from floodcheck.config.schema import FloodCheckConfig
from floodcheck.pipeline.flood_check_pipeline import FloodCheckPipeline

logger = logging.getLogger(__name__)

PID_DIR = Path("data")
PID_FILE = PID_DIR / "daemon.pid"
STATE_FILE = PID_DIR / "daemon_state.json"
LOG_DIR = Path("logs")
MAX_LOG_FILES = 100
STOP_WAIT_SECONDS = 120
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _read_pid() -> int | None:
    """PID recorded in the PID file, or None when absent or unreadable."""
    try:
        return int(PID_FILE.read_text().strip())
    except (FileNotFoundError, ValueError):
        return None


def _pid_alive(pid: int) -> bool:
    try:
        os.kill(pid, 0)
    except ProcessLookupError:
        return False
    return True


@contextmanager
def _run_log(path: Path):
    """Mirror root logging into a per-run file for the duration of the block."""
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


class FloodCheckDaemon:
    """Waits for each cron fire time and runs one flood check.

    Runs never overlap: the next fire time is computed only after the
    previous check returns, and a PID file keeps a second daemon out.
    """

    def __init__(self, config: FloodCheckConfig, db_path: str = "data/floodcheck.db"):
        self.config = config
        self.db_path = db_path
        self.trigger = CronTrigger.from_crontab(
            config.schedule.cron, timezone=ZoneInfo(config.schedule.timezone)
        )
        self._stop = threading.Event()
        self._total_runs = 0
        self._crashed_runs = 0
        self._started_at: str | None = None
        self._last_run_at: str | None = None
        self._next_run_at: datetime | None = None

    def start(self) -> None:
        """Claim the PID file and block in the schedule loop until stopped."""
        self._check_not_already_running()
        self._write_pid()
        self._setup_signals()
        self._stop.clear()
        self._started_at = datetime.now(UTC).isoformat()

        schedule = self.config.schedule
        logger.info(
            "Daemon started: cron=%r tz=%s pid=%d",
            schedule.cron, schedule.timezone, os.getpid(),
        )
        print(f"🌊 Flood check daemon started (pid {os.getpid()}, '{schedule.cron}' {schedule.timezone})")
        print(f"   Run logs in {LOG_DIR}/")
        print("   Stop with: python -m floodcheck daemon --stop")

        try:
            self._loop()
        except KeyboardInterrupt:
            logger.info("Keyboard interrupt, leaving schedule loop")
        finally:
            self._cleanup()

    def stop(self) -> None:
        self._stop.set()

    def next_fire_time(self, now: datetime | None = None) -> datetime | None:
        """Next scheduled run strictly after `now`."""
        return self.trigger.get_next_fire_time(None, now or datetime.now(UTC))

    def _loop(self) -> None:
        while not self._stop.is_set():
            self._next_run_at = self.next_fire_time()
            if self._next_run_at is None:
                logger.error("Schedule %r has no further fire times", self.config.schedule.cron)
                return
            logger.info("Next flood check at %s", self._next_run_at.isoformat())
            self._save_state()

            delay = (self._next_run_at - datetime.now(UTC)).total_seconds()
            if self._stop.wait(timeout=max(delay, 0.0)):
                break
            self._run_one_check()
            self._save_state()

    def _run_one_check(self) -> bool:
        """Run the pipeline once. False means it raised past its own handler."""
        self._total_runs += 1
        started = datetime.now(UTC)
        self._last_run_at = started.isoformat()
        log_path = LOG_DIR / f"check_{started:%Y%m%dT%H%M%SZ}.log"

        with _run_log(log_path):
            try:
                logger.info("Scheduled flood check #%d", self._total_runs)
                FloodCheckPipeline(self.config, self.db_path).run()
                ok = True
            except Exception:
                self._crashed_runs += 1
                logger.exception("Scheduled flood check #%d crashed", self._total_runs)
                ok = False
        self._rotate_logs()
        return ok

    def _rotate_logs(self) -> None:
        """Delete the oldest run logs beyond MAX_LOG_FILES."""
        if not LOG_DIR.exists():
            return
        logs = sorted(LOG_DIR.glob("check_*.log"))
        for old in logs[:-MAX_LOG_FILES]:
            old.unlink(missing_ok=True)

    def _setup_signals(self) -> None:
        def _handle(signum: int, frame: object) -> None:
            name = signal.Signals(signum).name
            logger.info("%s received, stopping after the current step", name)
            print(f"\n⏹️  {name} received, stopping...")
            self.stop()

        for sig in (signal.SIGTERM, signal.SIGINT):
            signal.signal(sig, _handle)

    def _check_not_already_running(self) -> None:
        if not PID_FILE.exists():
            return
        pid = _read_pid()
        if pid is None:
            PID_FILE.unlink(missing_ok=True)
            return
        try:
            alive = _pid_alive(pid)
        except PermissionError:
            print(f"❌ PID file names process {pid}, which cannot be signalled")
            sys.exit(1)
        if alive:
            print(f"❌ A daemon is already running as pid {pid}")
            print("   python -m floodcheck daemon --stop")
            sys.exit(1)
        logger.info("Removing stale PID file for pid %d", pid)
        PID_FILE.unlink(missing_ok=True)

    def _write_pid(self) -> None:
        PID_FILE.parent.mkdir(parents=True, exist_ok=True)
        PID_FILE.write_text(str(os.getpid()))

    def _save_state(self) -> None:
        """Write counters and schedule to STATE_FILE for `daemon --status`."""
        state = {
            "pid": os.getpid(),
            "started_at": self._started_at,
            "cron": self.config.schedule.cron,
            "timezone": self.config.schedule.timezone,
            "total_runs": self._total_runs,
            "crashed_runs": self._crashed_runs,
            "last_run_at": self._last_run_at,
            "next_run_at": self._next_run_at.isoformat() if self._next_run_at else None,
            "last_update": datetime.now(UTC).isoformat(),
        }
        STATE_FILE.parent.mkdir(parents=True, exist_ok=True)
        STATE_FILE.write_text(json.dumps(state, indent=2))

    def _cleanup(self) -> None:
        PID_FILE.unlink(missing_ok=True)
        self._next_run_at = None
        self._save_state()
        logger.info("Daemon exited after %d runs, %d crashed", self._total_runs, self._crashed_runs)
        print(f"⏹️  Daemon exited after {self._total_runs} runs ({self._crashed_runs} crashed)")


def stop_daemon() -> int:
    """Send SIGTERM to the daemon named in the PID file and wait for it to exit."""
    if not PID_FILE.exists():
        print("No daemon running (no PID file found)")
        return 1

    pid = _read_pid()
    if pid is None:
        print("PID file is unreadable, removing it")
        PID_FILE.unlink(missing_ok=True)
        return 1

    if not _pid_alive(pid):
        print(f"Process {pid} is gone, removing leftover PID and state files")
        PID_FILE.unlink(missing_ok=True)
        STATE_FILE.unlink(missing_ok=True)
        return 0

    print(f"Sending SIGTERM to daemon pid {pid}...")
    os.kill(pid, signal.SIGTERM)

    # A check in progress finishes before the loop exits
    deadline = time.monotonic() + STOP_WAIT_SECONDS
    while time.monotonic() < deadline:
        time.sleep(1)
        if not _pid_alive(pid):
            print("✅ Daemon stopped")
            PID_FILE.unlink(missing_ok=True)
            return 0

    print(f"⚠️  Daemon still alive after {STOP_WAIT_SECONDS}s, sending SIGKILL")
    os.kill(pid, signal.SIGKILL)
    PID_FILE.unlink(missing_ok=True)
    return 0


def daemon_status() -> int:
    """Print the last state written by the daemon. Returns 1 when there is none."""
    if not STATE_FILE.exists():
        print("No daemon state found")
        pid = _read_pid()
        if pid is not None:
            note = "process running" if _pid_alive(pid) else "stale"
            print(f"  (PID file names {pid}: {note})")
        return 1

    state = json.loads(STATE_FILE.read_text())
    pid = state.get("pid")
    try:
        running = pid is not None and _pid_alive(int(pid))
    except (ValueError, PermissionError):
        running = False

    print(f"{'🟢' if running else '🔴'} Daemon {'running' if running else 'stopped'}")
    print(f"  PID: {pid if pid is not None else '?'}")
    print(f"  Schedule: {state.get('cron', '?')} ({state.get('timezone', '?')})")
    print(f"  Started: {state.get('started_at') or '?'}")
    print(f"  Total runs: {state.get('total_runs', 0)}")
    print(f"  Crashed runs: {state.get('crashed_runs', 0)}")
    print(f"  Last run: {state.get('last_run_at') or 'never'}")
    print(f"  Next run: {state.get('next_run_at') or '-'}")
    print(f"  Last update: {state.get('last_update') or '?'}")
    return 0
