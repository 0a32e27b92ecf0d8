"""Start, stop and inspect the detached dashboard process."""

from __future__ import annotations

import logging
import os
import signal
import subprocess
import sys
import time
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from typing import Callable, Optional

import httpx

from superclaw_cli.core.atomic import atomic_write_text
from superclaw_cli.core.constants import DASHBOARD_LOG_FILENAME, DEFAULT_DASHBOARD_PORT, PID_FILENAME
from superclaw_cli.errors import LaunchError

logger = logging.getLogger(__name__)

DEFAULT_POLL_ATTEMPTS = 30
DEFAULT_POLL_INTERVAL = 1.0
RESTART_GRACE_SECONDS = 2.0

Probe = Callable[[str], bool]
Sleep = Callable[[float], None]
Spawn = Callable[..., subprocess.Popen]


class LaunchMode(StrEnum):
    DEV = "dev"
    PROD = "prod"

    @property
    def npm_args(self) -> list[str]:
        return ["npm", "run", "dev"] if self is LaunchMode.DEV else ["npm", "start"]


class LaunchOutcome(StrEnum):
    READY = "ready"
    NOT_READY = "not_ready"
    ALREADY_RUNNING = "already_running"


class StopOutcome(StrEnum):
    STOPPED = "stopped"
    NOT_RUNNING = "not_running"
    ALREADY_STOPPED = "already_stopped"


class DashboardState(StrEnum):
    RUNNING = "running"
    STOPPED = "stopped"
    STALE = "stale"


@dataclass
class LaunchResult:
    outcome: LaunchOutcome
    url: str
    pid: Optional[int] = None
    attempts: int = 0
    log_file: Optional[Path] = None
    exit_code: Optional[int] = None


@dataclass
class StopResult:
    outcome: StopOutcome
    pid: Optional[int] = None


def http_probe(url: str, timeout: float = 1.0) -> bool:
    """Return True when something is listening and answers 2xx or 404."""
    try:
        response = httpx.get(url, timeout=timeout, follow_redirects=False)
    except httpx.HTTPError:
        return False
    return response.is_success or response.status_code == 404


def is_process_alive(pid: int) -> bool:
    """Signal-0 liveness check."""
    try:
        os.kill(pid, 0)
    except ProcessLookupError:
        return False
    except PermissionError:
        # Exists but owned by someone else.
        return True
    except OSError:
        return False
    return True


def dashboard_url(port: int) -> str:
    return f"http://localhost:{port}"


class ProcessLauncher:
    """Manage one dashboard process per install directory via its pid file."""

    def __init__(
        self,
        probe: Probe | None = None,
        sleep: Sleep | None = None,
        spawn: Spawn | None = None,
        attempts: int = DEFAULT_POLL_ATTEMPTS,
        interval: float = DEFAULT_POLL_INTERVAL,
    ):
        self.probe = probe or http_probe
        self.sleep = sleep or time.sleep
        self.spawn = spawn or subprocess.Popen
        self.attempts = attempts
        self.interval = interval

    # -- pid file --------------------------------------------------------

    @staticmethod
    def pid_file(install_dir: Path) -> Path:
        return install_dir / PID_FILENAME

    @staticmethod
    def log_file(install_dir: Path) -> Path:
        return install_dir / DASHBOARD_LOG_FILENAME

    def read_pid(self, install_dir: Path) -> Optional[int]:
        path = self.pid_file(install_dir)
        try:
            text = path.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            return None
        try:
            return int(text)
        except ValueError:
            logger.warning("Ignoring malformed pid file %s", path)
            return None

    def _clear_pid(self, install_dir: Path) -> None:
        self.pid_file(install_dir).unlink(missing_ok=True)

    # -- operations ------------------------------------------------------

    def status(self, install_dir: Path) -> DashboardState:
        """Report the process state, clearing a stale pid file."""
        if not self.pid_file(install_dir).exists():
            return DashboardState.STOPPED
        pid = self.read_pid(install_dir)
        if pid is not None and is_process_alive(pid):
            return DashboardState.RUNNING
        self._clear_pid(install_dir)
        return DashboardState.STALE

    def start(
        self,
        install_dir: Path,
        mode: LaunchMode = LaunchMode.DEV,
        port: int = DEFAULT_DASHBOARD_PORT,
    ) -> LaunchResult:
        url = dashboard_url(port)
        existing = self.read_pid(install_dir)
        if existing is not None and is_process_alive(existing):
            return LaunchResult(LaunchOutcome.ALREADY_RUNNING, url, pid=existing)
        if self.pid_file(install_dir).exists():
            self._clear_pid(install_dir)

        log_path = self.log_file(install_dir)
        env = {**os.environ, "PORT": str(port)}
        popen_kwargs: dict = {}
        if sys.platform == "win32":
            popen_kwargs["creationflags"] = subprocess.CREATE_NEW_PROCESS_GROUP
        else:
            popen_kwargs["start_new_session"] = True

        logger.info("Starting dashboard (%s) in %s on port %s", mode, install_dir, port)
        try:
            with log_path.open("ab") as log:
                process = self.spawn(
                    mode.npm_args,
                    cwd=str(install_dir),
                    env=env,
                    stdin=subprocess.DEVNULL,
                    stdout=log,
                    stderr=subprocess.STDOUT,
                    **popen_kwargs,
                )
        except OSError as exc:
            raise LaunchError(
                f"Failed to start the dashboard: {exc}",
                "Check that npm is installed and the dashboard directory is correct.",
            ) from exc

        atomic_write_text(self.pid_file(install_dir), f"{process.pid}\n")
        outcome, attempts = self.wait_until_ready(url, process)
        exit_code = process.poll() if outcome is LaunchOutcome.NOT_READY else None
        if exit_code is not None:
            logger.warning("Dashboard exited during startup with code %s", exit_code)
            self._clear_pid(install_dir)
        return LaunchResult(
            outcome, url, pid=process.pid, attempts=attempts, log_file=log_path, exit_code=exit_code
        )

    def wait_until_ready(
        self, url: str, process: Optional[subprocess.Popen] = None
    ) -> tuple[LaunchOutcome, int]:
        """Probe *url* once per interval up to the attempt bound.

        Gives up early once *process* has exited.
        """
        for attempt in range(1, self.attempts + 1):
            self.sleep(self.interval)
            if self.probe(url):
                logger.debug("Dashboard ready after %d attempt(s)", attempt)
                return LaunchOutcome.READY, attempt
            if process is not None and process.poll() is not None:
                return LaunchOutcome.NOT_READY, attempt
        return LaunchOutcome.NOT_READY, self.attempts

    def stop(self, install_dir: Path) -> StopResult:
        """Send SIGTERM to the recorded process. Safe to call repeatedly."""
        if not self.pid_file(install_dir).exists():
            return StopResult(StopOutcome.NOT_RUNNING)
        pid = self.read_pid(install_dir)
        if pid is None:
            self._clear_pid(install_dir)
            return StopResult(StopOutcome.ALREADY_STOPPED)

        try:
            os.kill(pid, signal.SIGTERM)
        except ProcessLookupError:
            self._clear_pid(install_dir)
            return StopResult(StopOutcome.ALREADY_STOPPED, pid)
        except PermissionError as exc:
            raise LaunchError(
                f"Permission denied stopping the dashboard (PID {pid}).",
                f"Stop it manually with: kill {pid}",
            ) from exc

        self._clear_pid(install_dir)
        logger.info("Sent SIGTERM to dashboard PID %s", pid)
        return StopResult(StopOutcome.STOPPED, pid)

    def restart(
        self,
        install_dir: Path,
        mode: LaunchMode = LaunchMode.DEV,
        port: int = DEFAULT_DASHBOARD_PORT,
    ) -> tuple[StopResult, LaunchResult]:
        stopped = self.stop(install_dir)
        if stopped.outcome is StopOutcome.STOPPED:
            self.sleep(RESTART_GRACE_SECONDS)
        return stopped, self.start(install_dir, mode, port)


__all__ = [
    "DEFAULT_POLL_ATTEMPTS",
    "DEFAULT_POLL_INTERVAL",
    "DashboardState",
    "LaunchMode",
    "LaunchOutcome",
    "LaunchResult",
    "ProcessLauncher",
    "StopOutcome",
    "StopResult",
    "dashboard_url",
    "http_probe",
    "is_process_alive",
]
