"""Tests for the detached dashboard process launcher."""

from __future__ import annotations

import signal
from pathlib import Path

import httpx
import pytest

from superclaw_cli.dashboard.launcher import (
    DashboardState,
    LaunchMode,
    LaunchOutcome,
    ProcessLauncher,
    StopOutcome,
    http_probe,
    is_process_alive,
)
from superclaw_cli.errors import LaunchError


class FakeProcess:
    def __init__(self, pid: int, exits_after: int | None = None, returncode: int = 1):
        self.pid = pid
        self.exits_after = exits_after
        self.returncode = returncode
        self.polls = 0

    def poll(self):
        self.polls += 1
        if self.exits_after is not None and self.polls >= self.exits_after:
            return self.returncode
        return None


class Spawner:
    def __init__(self, pid: int = 4242, exits_after: int | None = None):
        self.pid = pid
        self.exits_after = exits_after
        self.calls: list[tuple[list[str], dict]] = []

    def __call__(self, args, **kwargs):
        self.calls.append((args, kwargs))
        return FakeProcess(self.pid, self.exits_after)


class Probe:
    def __init__(self, ready_after: int | None):
        self.ready_after = ready_after
        self.calls = 0

    def __call__(self, url: str) -> bool:
        self.calls += 1
        return self.ready_after is not None and self.calls >= self.ready_after


@pytest.fixture()
def sleeps() -> list[float]:
    return []


@pytest.fixture()
def alive(monkeypatch: pytest.MonkeyPatch) -> set[int]:
    pids: set[int] = set()
    monkeypatch.setattr("superclaw_cli.dashboard.launcher.is_process_alive", lambda pid: pid in pids)
    return pids


def make_launcher(sleeps, probe=None, spawner=None, attempts=30) -> ProcessLauncher:
    return ProcessLauncher(
        probe=probe or Probe(ready_after=1),
        sleep=sleeps.append,
        spawn=spawner or Spawner(),
        attempts=attempts,
        interval=1.0,
    )


class TestStart:
    def test_ready_on_third_probe(self, tmp_path: Path, sleeps, alive) -> None:
        probe = Probe(ready_after=3)
        spawner = Spawner(pid=1234)
        result = make_launcher(sleeps, probe, spawner).start(tmp_path, LaunchMode.DEV, 4000)

        assert result.outcome is LaunchOutcome.READY
        assert result.url == "http://localhost:4000"
        assert result.attempts == 3
        assert result.pid == 1234
        assert (tmp_path / ".dashboard.pid").read_text(encoding="utf-8").strip() == "1234"

        args, kwargs = spawner.calls[0]
        assert args == ["npm", "run", "dev"]
        assert kwargs["env"]["PORT"] == "4000"
        assert kwargs["cwd"] == str(tmp_path)

    def test_prod_mode_uses_npm_start(self, tmp_path: Path, sleeps, alive) -> None:
        spawner = Spawner()
        make_launcher(sleeps, spawner=spawner).start(tmp_path, LaunchMode.PROD)
        assert spawner.calls[0][0] == ["npm", "start"]

    def test_polling_is_bounded(self, tmp_path: Path, sleeps, alive) -> None:
        probe = Probe(ready_after=None)
        result = make_launcher(sleeps, probe, attempts=30).start(tmp_path)

        assert result.outcome is LaunchOutcome.NOT_READY
        assert probe.calls == 30
        assert sleeps == [1.0] * 30
        assert (tmp_path / ".dashboard.pid").exists()

    def test_early_exit_stops_polling(self, tmp_path: Path, sleeps, alive) -> None:
        probe = Probe(ready_after=None)
        result = make_launcher(sleeps, probe, Spawner(pid=99, exits_after=2), attempts=30).start(tmp_path)

        assert result.outcome is LaunchOutcome.NOT_READY
        assert result.exit_code == 1
        assert result.attempts == 2
        assert probe.calls == 2
        assert sleeps == [1.0, 1.0]
        assert not (tmp_path / ".dashboard.pid").exists()

    def test_already_running(self, tmp_path: Path, sleeps, alive) -> None:
        (tmp_path / ".dashboard.pid").write_text("555\n", encoding="utf-8")
        alive.add(555)
        spawner = Spawner()

        result = make_launcher(sleeps, spawner=spawner).start(tmp_path)

        assert result.outcome is LaunchOutcome.ALREADY_RUNNING
        assert result.pid == 555
        assert spawner.calls == []

    def test_stale_pid_file_replaced(self, tmp_path: Path, sleeps, alive) -> None:
        (tmp_path / ".dashboard.pid").write_text("555\n", encoding="utf-8")
        result = make_launcher(sleeps, spawner=Spawner(pid=777)).start(tmp_path)
        assert result.outcome is LaunchOutcome.READY
        assert (tmp_path / ".dashboard.pid").read_text(encoding="utf-8").strip() == "777"

    def test_spawn_failure(self, tmp_path: Path, sleeps, alive) -> None:
        def broken(*args, **kwargs):
            raise FileNotFoundError("npm")

        launcher = ProcessLauncher(probe=Probe(1), sleep=sleeps.append, spawn=broken)
        with pytest.raises(LaunchError):
            launcher.start(tmp_path)
        assert not (tmp_path / ".dashboard.pid").exists()

    def test_output_goes_to_log_file(self, tmp_path: Path, sleeps, alive) -> None:
        spawner = Spawner()
        result = make_launcher(sleeps, spawner=spawner).start(tmp_path)
        assert result.log_file == tmp_path / "dashboard.log"
        assert result.log_file.exists()


class TestStatus:
    def test_stopped_without_pid_file(self, tmp_path: Path, sleeps, alive) -> None:
        assert make_launcher(sleeps).status(tmp_path) is DashboardState.STOPPED

    def test_running(self, tmp_path: Path, sleeps, alive) -> None:
        (tmp_path / ".dashboard.pid").write_text("99", encoding="utf-8")
        alive.add(99)
        assert make_launcher(sleeps).status(tmp_path) is DashboardState.RUNNING

    def test_stale_pid_file_cleared(self, tmp_path: Path, sleeps, alive) -> None:
        (tmp_path / ".dashboard.pid").write_text("99", encoding="utf-8")
        assert make_launcher(sleeps).status(tmp_path) is DashboardState.STALE
        assert not (tmp_path / ".dashboard.pid").exists()

    def test_malformed_pid_file(self, tmp_path: Path, sleeps, alive) -> None:
        (tmp_path / ".dashboard.pid").write_text("not-a-pid", encoding="utf-8")
        assert make_launcher(sleeps).status(tmp_path) is DashboardState.STALE


class TestStop:
    def test_stop_sends_sigterm(self, tmp_path: Path, sleeps, monkeypatch: pytest.MonkeyPatch) -> None:
        sent: list[tuple[int, int]] = []
        monkeypatch.setattr("superclaw_cli.dashboard.launcher.os.kill", lambda pid, sig: sent.append((pid, sig)))
        (tmp_path / ".dashboard.pid").write_text("321", encoding="utf-8")

        result = make_launcher(sleeps).stop(tmp_path)

        assert result.outcome is StopOutcome.STOPPED
        assert sent == [(321, signal.SIGTERM)]
        assert not (tmp_path / ".dashboard.pid").exists()

    def test_stop_is_idempotent(self, tmp_path: Path, sleeps, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("superclaw_cli.dashboard.launcher.os.kill", lambda pid, sig: None)
        (tmp_path / ".dashboard.pid").write_text("321", encoding="utf-8")
        launcher = make_launcher(sleeps)

        assert launcher.stop(tmp_path).outcome is StopOutcome.STOPPED
        assert launcher.stop(tmp_path).outcome is StopOutcome.NOT_RUNNING
        assert launcher.stop(tmp_path).outcome is StopOutcome.NOT_RUNNING

    def test_process_already_gone(self, tmp_path: Path, sleeps, monkeypatch: pytest.MonkeyPatch) -> None:
        def gone(pid, sig):
            raise ProcessLookupError

        monkeypatch.setattr("superclaw_cli.dashboard.launcher.os.kill", gone)
        (tmp_path / ".dashboard.pid").write_text("321", encoding="utf-8")

        result = make_launcher(sleeps).stop(tmp_path)

        assert result.outcome is StopOutcome.ALREADY_STOPPED
        assert not (tmp_path / ".dashboard.pid").exists()

    def test_permission_denied(self, tmp_path: Path, sleeps, monkeypatch: pytest.MonkeyPatch) -> None:
        def denied(pid, sig):
            raise PermissionError

        monkeypatch.setattr("superclaw_cli.dashboard.launcher.os.kill", denied)
        (tmp_path / ".dashboard.pid").write_text("1", encoding="utf-8")

        with pytest.raises(LaunchError, match="Permission denied"):
            make_launcher(sleeps).stop(tmp_path)
        assert (tmp_path / ".dashboard.pid").exists()


class TestRestart:
    def test_restart_waits_after_stopping(self, tmp_path: Path, sleeps, alive, monkeypatch) -> None:
        monkeypatch.setattr("superclaw_cli.dashboard.launcher.os.kill", lambda pid, sig: None)
        (tmp_path / ".dashboard.pid").write_text("321", encoding="utf-8")

        stopped, started = make_launcher(sleeps, spawner=Spawner(pid=654)).restart(tmp_path)

        assert stopped.outcome is StopOutcome.STOPPED
        assert started.outcome is LaunchOutcome.READY
        assert sleeps[0] == 2.0
        assert started.pid == 654

    def test_restart_when_not_running(self, tmp_path: Path, sleeps, alive) -> None:
        stopped, started = make_launcher(sleeps).restart(tmp_path)
        assert stopped.outcome is StopOutcome.NOT_RUNNING
        assert started.outcome is LaunchOutcome.READY
        assert sleeps == [1.0]


class TestProbes:
    def test_current_process_is_alive(self) -> None:
        import os

        assert is_process_alive(os.getpid())

    @pytest.mark.parametrize(("status", "expected"), [(200, True), (404, True), (500, False), (302, False)])
    def test_http_probe_status(self, monkeypatch: pytest.MonkeyPatch, status: int, expected: bool) -> None:
        monkeypatch.setattr(
            "superclaw_cli.dashboard.launcher.httpx.get",
            lambda url, **kwargs: httpx.Response(status, request=httpx.Request("GET", url)),
        )
        assert http_probe("http://localhost:3077") is expected

    def test_http_probe_connection_refused(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def refuse(url, **kwargs):
            raise httpx.ConnectError("refused")

        monkeypatch.setattr("superclaw_cli.dashboard.launcher.httpx.get", refuse)
        assert http_probe("http://localhost:3077") is False
