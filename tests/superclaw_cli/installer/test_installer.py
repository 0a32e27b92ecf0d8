"""Tests for the two-phase dashboard installer."""

from __future__ import annotations

from pathlib import Path

import pytest

from superclaw_cli.errors import AcquisitionError, DependencyInstallError, PreconditionError
from superclaw_cli.installer import Installer, InstallOptions
from superclaw_cli.installer.core import InstallStatus
from superclaw_cli.installer.peer import PeerStatus
from superclaw_cli.installer.record import has_record, load_record


class StaticProvider:
    def __init__(self, status):
        self._status = status

    def status(self):
        return self._status


def listing(path: Path) -> list[tuple[str, bytes]]:
    return sorted((str(p.relative_to(path)), p.read_bytes()) for p in path.rglob("*") if p.is_file())


@pytest.fixture()
def runner(fake_runner):
    return fake_runner.on("git", "rev-parse", stdout="abc1234\n")


class TestInstall:
    def test_happy_path(self, tmp_path: Path, runner, scripted, printer) -> None:
        target = tmp_path / "dash"
        installer = Installer(runner, scripted(), printer)
        result = installer.install(target, InstallOptions(repo_url="https://example.com/dash.git"))

        assert result.status is InstallStatus.INSTALLED
        assert result.build_ok
        assert runner.ran("git", "clone", "--depth", "1", "https://example.com/dash.git")
        assert runner.ran("npm", "install")
        assert runner.ran("npm", "run", "build")
        record = load_record(target.resolve())
        assert record.source_version == "abc1234"
        assert record.source_url == "https://example.com/dash.git"
        assert record.tier == "free"
        assert [installer.tracker.status_of(k) for k in ("clone", "deps", "build", "record")] == ["done"] * 4

    def test_steps_run_in_order(self, tmp_path: Path, runner, scripted, printer) -> None:
        Installer(runner, scripted(), printer).install(tmp_path / "dash")
        commands = [" ".join(call[:3]) for call in runner.calls if call[0] in ("git", "npm")]
        assert commands.index("git clone --depth") < commands.index("npm install") < commands.index("npm run build")

    def test_clone_failure(self, tmp_path: Path, runner, scripted, printer) -> None:
        runner.on("git", "clone", returncode=128, stderr="fatal: repository not found")
        installer = Installer(runner, scripted(), printer)
        with pytest.raises(AcquisitionError, match="repository not found"):
            installer.install(tmp_path / "dash")
        assert installer.tracker.status_of("clone") == "error"
        assert not runner.ran("npm")
        assert not has_record(tmp_path / "dash")

    def test_dependency_failure_leaves_no_record(self, tmp_path: Path, runner, scripted, printer) -> None:
        runner.on("npm", "install", returncode=1, stderr="npm ERR! network")
        installer = Installer(runner, scripted(), printer)
        with pytest.raises(DependencyInstallError):
            installer.install(tmp_path / "dash")
        assert not has_record(tmp_path / "dash")
        assert not runner.ran("npm", "run", "build")
        assert installer.tracker.status_of("record") == "pending"

    def test_build_failure_is_soft(self, tmp_path: Path, runner, scripted, printer) -> None:
        runner.on("npm", "run", "build", returncode=1, stderr="Type error in page.tsx")
        installer = Installer(runner, scripted(), printer)
        result = installer.install(tmp_path / "dash")

        assert result.status is InstallStatus.INSTALLED
        assert not result.build_ok
        assert any("dev mode" in w for w in result.warnings)
        assert installer.tracker.status_of("build") == "warning"
        assert has_record(tmp_path / "dash")


class TestTargetDirectory:
    def test_non_empty_declined_is_untouched(self, tmp_path: Path, runner, scripted, printer) -> None:
        target = tmp_path / "dash"
        (target / "src").mkdir(parents=True)
        (target / "keep.txt").write_text("precious", encoding="utf-8")
        (target / "src" / "app.js").write_text("console.log(1)", encoding="utf-8")
        before = listing(target)

        result = Installer(runner, scripted(False), printer).install(target)

        assert result.cancelled
        assert listing(target) == before
        assert runner.calls == [["node", "--version"]]

    def test_non_empty_without_prompter_cancels(self, tmp_path: Path, runner, printer) -> None:
        target = tmp_path / "dash"
        target.mkdir()
        (target / "keep.txt").write_text("precious", encoding="utf-8")
        assert Installer(runner, None, printer).install(target).cancelled

    def test_non_empty_confirmed_is_cleared(self, tmp_path: Path, runner, scripted, printer) -> None:
        target = tmp_path / "dash"
        (target / "old").mkdir(parents=True)
        (target / "old" / "file.txt").write_text("stale", encoding="utf-8")

        Installer(runner, scripted(True), printer).install(target)

        assert not (target / "old").exists()
        assert has_record(target)

    def test_force_skips_confirmation(self, tmp_path: Path, runner, scripted, printer) -> None:
        target = tmp_path / "dash"
        target.mkdir()
        (target / "stale.txt").write_text("x", encoding="utf-8")
        prompter = scripted()

        Installer(runner, prompter, printer).install(target, InstallOptions(clear_existing=True))

        assert prompter.questions == []
        assert not (target / "stale.txt").exists()

    def test_empty_directory_needs_no_confirmation(self, tmp_path: Path, runner, scripted, printer) -> None:
        target = tmp_path / "dash"
        target.mkdir()
        prompter = scripted()
        assert not Installer(runner, prompter, printer).install(target).cancelled
        assert prompter.questions == []

    def test_file_target_rejected(self, tmp_path: Path, runner, scripted, printer) -> None:
        target = tmp_path / "dash"
        target.write_text("not a directory", encoding="utf-8")
        with pytest.raises(PreconditionError, match="not a directory"):
            Installer(runner, scripted(True), printer).install(target)

    def test_home_directory_is_protected(self, isolated_home: Path, runner, scripted, printer) -> None:
        (isolated_home / ".bashrc").write_text("export X=1", encoding="utf-8")
        with pytest.raises(PreconditionError, match="Refusing"):
            Installer(runner, scripted(True), printer).install(isolated_home, InstallOptions(clear_existing=True))
        assert (isolated_home / ".bashrc").exists()


class TestPrerequisitesAndPeer:
    def test_missing_node_writes_nothing(self, tmp_path: Path, make_runner, scripted, printer) -> None:
        runner = make_runner(tools=("git", "npm"))
        with pytest.raises(PreconditionError):
            Installer(runner, scripted(), printer).install(tmp_path / "dash")
        assert not (tmp_path / "dash").exists()

    def test_peer_absent_declined(self, tmp_path: Path, runner, scripted, printer) -> None:
        installer = Installer(runner, scripted(False), printer, peer=StaticProvider(None))
        assert installer.install(tmp_path / "dash").cancelled
        assert not runner.ran("git")

    def test_peer_absent_accepted_is_degraded(self, tmp_path: Path, runner, scripted, printer) -> None:
        installer = Installer(runner, scripted(True), printer, peer=StaticProvider(None))
        result = installer.install(tmp_path / "dash")
        assert result.degraded
        assert has_record(tmp_path / "dash")

    def test_peer_present(self, tmp_path: Path, runner, scripted, printer, output) -> None:
        prompter = scripted()
        installer = Installer(runner, prompter, printer, peer=StaticProvider(PeerStatus(workspace=tmp_path)))
        result = installer.install(tmp_path / "dash")
        assert not result.degraded
        assert prompter.questions == []
        assert "OpenClaw gateway detected" in output(printer)

    def test_peer_check_disabled(self, tmp_path: Path, runner, scripted, printer) -> None:
        prompter = scripted()
        installer = Installer(runner, prompter, printer, peer=StaticProvider(None))
        installer.install(tmp_path / "dash", InstallOptions(check_peer=False))
        assert prompter.questions == []
