"""CLI tests for ``superclaw fix-env``."""

from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from superclaw_cli import app
from superclaw_cli.installer.peer import PeerStatus
from superclaw_cli.installer.record import InstallationRecord, save_record

runner = CliRunner()


class StaticProvider:
    def __init__(self, status):
        self._status = status

    def status(self):
        return self._status


@pytest.fixture()
def dash(tmp_path: Path) -> Path:
    path = tmp_path / "dash"
    path.mkdir()
    save_record(InstallationRecord(install_dir=str(path)))
    return path


@pytest.fixture()
def peer(monkeypatch: pytest.MonkeyPatch, fake_runner):
    def _peer(status):
        monkeypatch.setattr("superclaw_cli.cli.commands.init.get_runner", lambda: fake_runner)
        monkeypatch.setattr("superclaw_cli.cli.commands.init.get_peer_provider", lambda runner: StaticProvider(status))

    return _peer


def test_writes_gateway_workspace(tmp_path: Path, dash: Path, peer) -> None:
    oc = tmp_path / "oc"
    oc.mkdir()
    peer(PeerStatus(workspace=oc))

    result = runner.invoke(app, ["fix-env", "--dir", str(dash)])

    assert result.exit_code == 0, result.output
    assert (dash / ".env").read_text(encoding="utf-8") == f"OPENCLAW_WORKSPACE={oc}\n"
    assert "superclaw dashboard restart" in result.output


def test_second_run_changes_nothing(tmp_path: Path, dash: Path, peer) -> None:
    oc = tmp_path / "oc"
    oc.mkdir()
    peer(PeerStatus(workspace=oc))
    runner.invoke(app, ["fix-env", "--dir", str(dash)])

    result = runner.invoke(app, ["fix-env", "--dir", str(dash)])

    assert result.exit_code == 0
    assert "already configured correctly" in result.output


def test_falls_back_to_home_workspace(isolated_home: Path, dash: Path, peer) -> None:
    default = isolated_home / ".openclaw" / "workspace"
    default.mkdir(parents=True)
    peer(None)

    result = runner.invoke(app, ["fix-env", "--dir", str(dash)])

    assert result.exit_code == 0, result.output
    assert f"OPENCLAW_WORKSPACE={default}" in (dash / ".env").read_text(encoding="utf-8")


def test_missing_peer_workspace(dash: Path, peer) -> None:
    peer(None)
    result = runner.invoke(app, ["fix-env", "--dir", str(dash)])
    assert result.exit_code == 1
    assert "OpenClaw workspace not found" in result.output
    assert not (dash / ".env").exists()


def test_not_a_dashboard(tmp_path: Path, peer) -> None:
    oc = tmp_path / "oc"
    oc.mkdir()
    peer(PeerStatus(workspace=oc))
    result = runner.invoke(app, ["fix-env", "--dir", str(tmp_path / "nowhere")])
    assert result.exit_code == 1
    assert "not a SuperClaw dashboard" in result.output
