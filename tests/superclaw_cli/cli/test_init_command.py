"""CLI tests for ``superclaw init``."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from superclaw_cli import app
from superclaw_cli.dashboard import ProcessLauncher
from superclaw_cli.installer.peer import PeerStatus
from superclaw_cli.installer.record import has_record
from superclaw_cli.users import BcryptHasher, open_user_store
from superclaw_cli.workspace import load_config

runner = CliRunner()


class StaticProvider:
    def __init__(self, status):
        self._status = status

    def status(self):
        return self._status


class FakeProcess:
    pid = 2468
    returncode = None

    def poll(self):
        return self.returncode


@pytest.fixture()
def install_runner(fake_runner):
    return fake_runner.on("git", "rev-parse", stdout="abc1234\n")


@pytest.fixture()
def wire(monkeypatch: pytest.MonkeyPatch, install_runner):
    """Install fakes for the prompter, command runner and gateway probe."""

    def _wire(prompter, peer_status=None):
        monkeypatch.setattr("superclaw_cli.cli.commands.init.get_prompter", lambda: prompter)
        monkeypatch.setattr("superclaw_cli.cli.commands.init.get_runner", lambda: install_runner)
        monkeypatch.setattr(
            "superclaw_cli.cli.commands.init.get_peer_provider",
            lambda runner: StaticProvider(peer_status),
        )
        return prompter

    return _wire


@pytest.fixture()
def launched(monkeypatch: pytest.MonkeyPatch) -> list[list[str]]:
    calls: list[list[str]] = []

    def spawn(args, **kwargs):
        calls.append(args)
        return FakeProcess()

    launcher = ProcessLauncher(probe=lambda url: True, sleep=lambda s: None, spawn=spawn)
    monkeypatch.setattr("superclaw_cli.cli.commands.dashboard.get_launcher", lambda: launcher)
    return calls


class TestWorkspaceOnly:
    def test_skip_dashboard(self, tmp_path: Path, wire, scripted, install_runner) -> None:
        wire(scripted("other", "Nova", "direct", "Sam"))
        ws = tmp_path / "ws"

        result = runner.invoke(app, ["init", "--dir", str(ws), "--skip-dashboard"])

        assert result.exit_code == 0, result.output
        for name in ("SOUL.md", "USER.md", "AGENTS.md", "MEMORY.md", "superclaw-config.json"):
            assert (ws / name).is_file(), name
        config = load_config(ws)
        assert config.ai.name == "Nova"
        assert config.user.name == "Sam"
        assert config.backend == "other"
        assert not install_runner.ran("git")

    def test_backend_defaults_to_openclaw_when_detected(self, tmp_path: Path, wire, scripted) -> None:
        prompter = wire(scripted(), peer_status=PeerStatus(workspace=tmp_path / "oc"))
        result = runner.invoke(app, ["init", "--dir", str(tmp_path / "ws"), "--skip-dashboard"])
        assert result.exit_code == 0, result.output
        assert load_config(tmp_path / "ws").backend == "openclaw"
        assert prompter.questions[0] == "Which AI backend will you use?"

    def test_existing_workspace_declined(self, tmp_path: Path, wire, scripted) -> None:
        ws = tmp_path / "ws"
        ws.mkdir()
        (ws / "superclaw-config.json").write_text('{"workspace": "x"}', encoding="utf-8")
        wire(scripted(False))

        result = runner.invoke(app, ["init", "--dir", str(ws), "--skip-dashboard"])

        assert result.exit_code == 0
        assert "Setup cancelled" in result.output
        assert not (ws / "SOUL.md").exists()

    def test_workspace_path_prompted(self, tmp_path: Path, wire, scripted) -> None:
        ws = tmp_path / "prompted"
        wire(scripted(str(ws)))
        result = runner.invoke(app, ["init", "--skip-dashboard"])
        assert result.exit_code == 0, result.output
        assert (ws / "SOUL.md").is_file()


class TestFullInit:
    def _answers(self, scripted, *tail):
        return scripted("other", "Nova", "direct", "Sam", "Developer", "UTC", *tail)

    def test_installs_provisions_and_starts(self, tmp_path: Path, wire, scripted, launched, install_runner) -> None:
        wire(self._answers(scripted, True, "admin@example.com", True))
        ws = tmp_path / "ws"
        dash = tmp_path / "dash"

        result = runner.invoke(
            app,
            ["init", "--dir", str(ws), "--dashboard-dir", str(dash), "--port", "4200", "--no-browser"],
        )

        assert result.exit_code == 0, result.output
        assert has_record(dash)
        config = load_config(ws)
        assert config.dashboard.install_dir == str(dash.resolve())
        assert config.dashboard.port == 4200
        store = open_user_store(hasher=BcryptHasher(rounds=4))
        assert store.get_user("admin@example.com") is not None
        assert launched == [["npm", "start"]]
        assert "http://localhost:4200" in result.output

    def test_build_failure_starts_dev_mode(self, tmp_path: Path, wire, scripted, launched, install_runner) -> None:
        install_runner.on("npm", "run", "build", returncode=1, stderr="build broke")
        wire(self._answers(scripted, False))

        result = runner.invoke(
            app,
            ["init", "--dir", str(tmp_path / "ws"), "--dashboard-dir", str(tmp_path / "dash"), "--no-browser"],
        )

        assert result.exit_code == 0, result.output
        assert launched == [["npm", "run", "dev"]]
        assert "build broke" in result.output

    def test_no_start(self, tmp_path: Path, wire, scripted, launched) -> None:
        wire(self._answers(scripted, False))
        result = runner.invoke(
            app,
            ["init", "--dir", str(tmp_path / "ws"), "--dashboard-dir", str(tmp_path / "dash"), "--no-start"],
        )
        assert result.exit_code == 0, result.output
        assert launched == []
        assert "superclaw dashboard start" in result.output

    def test_non_empty_dashboard_dir_declined(self, tmp_path: Path, wire, scripted, launched, install_runner) -> None:
        dash = tmp_path / "dash"
        dash.mkdir()
        (dash / "notes.txt").write_text("mine", encoding="utf-8")
        wire(self._answers(scripted, False))

        result = runner.invoke(app, ["init", "--dir", str(tmp_path / "ws"), "--dashboard-dir", str(dash)])

        assert result.exit_code == 0
        assert [p.name for p in dash.iterdir()] == ["notes.txt"]
        assert not install_runner.ran("git", "clone")
        assert (tmp_path / "ws" / "SOUL.md").is_file()

    def test_force_clears_dashboard_dir(self, tmp_path: Path, wire, scripted, launched) -> None:
        dash = tmp_path / "dash"
        dash.mkdir()
        (dash / "stale.txt").write_text("old", encoding="utf-8")
        wire(self._answers(scripted, False))

        result = runner.invoke(
            app,
            ["init", "--dir", str(tmp_path / "ws"), "--dashboard-dir", str(dash), "--force", "--no-start"],
        )

        assert result.exit_code == 0, result.output
        assert not (dash / "stale.txt").exists()
        assert has_record(dash)

    def test_dependency_failure_exits_nonzero(self, tmp_path: Path, wire, scripted, install_runner) -> None:
        install_runner.on("npm", "install", returncode=1, stderr="ERESOLVE unable to resolve")
        wire(self._answers(scripted))

        result = runner.invoke(app, ["init", "--dir", str(tmp_path / "ws"), "--dashboard-dir", str(tmp_path / "dash")])

        assert result.exit_code == 1
        assert "ERESOLVE" in result.output
        assert not has_record(tmp_path / "dash")
        config = json.loads((tmp_path / "ws" / "superclaw-config.json").read_text(encoding="utf-8"))
        assert "dashboard" not in config

    def test_missing_node_exits_nonzero(self, tmp_path: Path, wire, scripted, install_runner) -> None:
        install_runner.tools.discard("node")
        wire(self._answers(scripted))

        result = runner.invoke(app, ["init", "--dir", str(tmp_path / "ws"), "--dashboard-dir", str(tmp_path / "dash")])

        assert result.exit_code == 1
        assert "Node.js" in result.output
        assert not (tmp_path / "dash").exists()

    def test_existing_users_skip_admin_setup(self, tmp_path: Path, wire, scripted, launched) -> None:
        open_user_store(create=True, hasher=BcryptHasher(rounds=4)).create_user("first@example.com", "admin")
        prompter = wire(self._answers(scripted))

        result = runner.invoke(
            app,
            ["init", "--dir", str(tmp_path / "ws"), "--dashboard-dir", str(tmp_path / "dash"), "--no-start"],
        )

        assert result.exit_code == 0, result.output
        assert "skipping admin setup" in result.output
        assert "Create the dashboard admin account now?" not in prompter.questions

    def test_openclaw_backend_links_dashboard_env(self, tmp_path: Path, wire, scripted, launched) -> None:
        peer_workspace = tmp_path / "oc"
        peer_workspace.mkdir()
        wire(
            scripted("openclaw", "Nova", "direct", "Sam", "Developer", "UTC", False),
            peer_status=PeerStatus(workspace=peer_workspace),
        )
        dash = tmp_path / "dash"

        result = runner.invoke(
            app,
            ["init", "--dir", str(tmp_path / "ws"), "--dashboard-dir", str(dash), "--no-start"],
        )

        assert result.exit_code == 0, result.output
        assert (dash / ".env").read_text(encoding="utf-8") == f"OPENCLAW_WORKSPACE={peer_workspace}\n"
