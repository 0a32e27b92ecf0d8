"""CLI tests for ``superclaw memory``."""

from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from superclaw_cli import app
from superclaw_cli.workspace import IdentityProfile, OperatorProfile, create_workspace

runner = CliRunner()


@pytest.fixture()
def workspace(tmp_path: Path) -> Path:
    ws = tmp_path / "ws"
    create_workspace(ws, IdentityProfile.from_preset("Nova", "friendly"), OperatorProfile(name="Sam"))
    (ws / "memory" / "2000-01-01.md").write_text("# old\n", encoding="utf-8")
    return ws


def test_stats(workspace: Path) -> None:
    result = runner.invoke(app, ["memory", "stats", "--dir", str(workspace)])
    assert result.exit_code == 0, result.output
    assert "Daily files" in result.output
    assert "2000-01-01 to" in result.output


def test_backup(workspace: Path) -> None:
    result = runner.invoke(app, ["memory", "backup", "--dir", str(workspace)])
    assert result.exit_code == 0, result.output
    backups = list((workspace / "backups").iterdir())
    assert len(backups) == 1
    assert (backups[0] / "memory" / "2000-01-01.md").is_file()


def test_clean_with_yes(workspace: Path) -> None:
    result = runner.invoke(app, ["memory", "clean", "--dir", str(workspace), "--yes"])
    assert result.exit_code == 0, result.output
    assert not (workspace / "memory" / "2000-01-01.md").exists()
    assert (workspace / "memory" / "archive" / "2000-01-01.md.gz").is_file()


def test_clean_declined(workspace: Path, scripted, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("superclaw_cli.cli.commands.init.get_prompter", lambda: scripted(False))
    result = runner.invoke(app, ["memory", "clean", "--dir", str(workspace)])
    assert result.exit_code == 0
    assert "Cleanup cancelled" in result.output
    assert (workspace / "memory" / "2000-01-01.md").exists()


def test_clean_dry_run(workspace: Path) -> None:
    result = runner.invoke(app, ["memory", "clean", "--dir", str(workspace), "--dry-run", "--delete"])
    assert result.exit_code == 0
    assert "Would delete 1 file(s)" in result.output
    assert (workspace / "memory" / "2000-01-01.md").exists()


def test_no_memory_dir(tmp_path: Path) -> None:
    result = runner.invoke(app, ["memory", "stats", "--dir", str(tmp_path)])
    assert result.exit_code == 1
    assert "Memory directory not found" in result.output
