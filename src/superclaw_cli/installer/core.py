"""Dashboard installation: prerequisites, acquisition, dependencies, build.

Installation runs in two phases. ``prepare`` performs every check and every
interactive confirmation and returns a plan (or None when the operator
cancels). ``execute`` then runs the non-interactive steps, which is what the
command layer renders inside a live ``StepTracker``. Nothing under the target
directory is touched before ``prepare`` has finished, and the installation
record is written last, so an interrupted install is retried by simply
running it again.
"""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path
from typing import Optional

from superclaw_cli.cli.prompts import Prompter
from superclaw_cli.cli.ui import Printer, StepTracker
from superclaw_cli.core.constants import DEFAULT_DASHBOARD_REPO
from superclaw_cli.errors import (
    AcquisitionError,
    DependencyInstallError,
    PreconditionError,
)
from superclaw_cli.installer.peer import PeerStatus, PeerStatusProvider
from superclaw_cli.installer.prerequisites import NodeVersion, check_prerequisites
from superclaw_cli.installer.record import InstallationRecord, save_record
from superclaw_cli.installer.runner import CommandRunner

logger = logging.getLogger(__name__)

INSTALL_STEPS: list[tuple[str, str]] = [
    ("clone", "Download dashboard source"),
    ("deps", "Install dependencies"),
    ("build", "Build dashboard"),
    ("record", "Save installation record"),
]


class InstallStatus(StrEnum):
    INSTALLED = "installed"
    CANCELLED = "cancelled"


@dataclass
class InstallOptions:
    repo_url: str = DEFAULT_DASHBOARD_REPO
    clear_existing: bool = False
    check_peer: bool = True


@dataclass
class InstallPlan:
    target_dir: Path
    options: InstallOptions
    node_version: NodeVersion
    peer: Optional[PeerStatus] = None
    clear_target: bool = False


@dataclass
class InstallationResult:
    status: InstallStatus
    install_dir: Path
    record: Optional[InstallationRecord] = None
    build_ok: bool = False
    degraded: bool = False
    warnings: list[str] = field(default_factory=list)

    @property
    def cancelled(self) -> bool:
        return self.status is InstallStatus.CANCELLED


def _is_protected(path: Path) -> bool:
    resolved = path.resolve()
    return resolved == Path(resolved.anchor) or resolved == Path.home().resolve()


class Installer:
    """Install the dashboard into a directory."""

    def __init__(
        self,
        runner: CommandRunner | None = None,
        prompter: Prompter | None = None,
        printer: Printer | None = None,
        peer: PeerStatusProvider | None = None,
        tracker: StepTracker | None = None,
    ):
        self.runner = runner or CommandRunner()
        self.prompter = prompter
        self.printer = printer or Printer()
        self.peer = peer
        self.tracker = tracker or StepTracker("Install SuperClaw Dashboard")
        for key, label in INSTALL_STEPS:
            self.tracker.add(key, label)

    # -- Phase 1 ---------------------------------------------------------

    def _confirm(self, question: str, default: bool) -> bool:
        if self.prompter is None:
            return False
        return self.prompter.confirm(question, default=default)

    def prepare(self, target_dir: Path, options: InstallOptions | None = None) -> Optional[InstallPlan]:
        """Check preconditions and collect confirmations.

        Returns None when the operator declines a confirmation.

        Raises:
            PreconditionError: a required tool is missing or the target is unusable.
        """
        options = options or InstallOptions()
        target_dir = target_dir.expanduser().resolve()

        node_version = check_prerequisites(self.runner)
        self.printer.success(f"Node.js {node_version} detected")

        peer_status: Optional[PeerStatus] = None
        if options.check_peer and self.peer is not None:
            peer_status = self.peer.status()
            if peer_status is None:
                self.printer.warn("OpenClaw gateway not detected. Agent features will be unavailable.")
                if not self._confirm("Continue without OpenClaw?", default=False):
                    self.printer.info("Installation cancelled.")
                    return None
            else:
                self.printer.success("OpenClaw gateway detected")

        clear_target = False
        if target_dir.exists():
            if not target_dir.is_dir():
                raise PreconditionError(
                    f"{target_dir} exists and is not a directory.",
                    "Choose a different --dashboard-dir.",
                )
            if any(target_dir.iterdir()):
                if _is_protected(target_dir):
                    raise PreconditionError(
                        f"Refusing to clear {target_dir}.",
                        "Choose a dedicated directory for the dashboard.",
                    )
                if not options.clear_existing and not self._confirm(
                    f"{target_dir} is not empty. Delete its contents and reinstall?",
                    default=False,
                ):
                    self.printer.info("Installation cancelled. Nothing was changed.")
                    return None
                clear_target = True

        return InstallPlan(
            target_dir=target_dir,
            options=options,
            node_version=node_version,
            peer=peer_status,
            clear_target=clear_target,
        )

    # -- Phase 2 ---------------------------------------------------------

    def execute(self, plan: InstallPlan) -> InstallationResult:
        """Run the clone, dependency, build and record steps.

        Raises:
            AcquisitionError: the source could not be fetched.
            DependencyInstallError: ``npm install`` failed.
            InstallRecordError: the record could not be written.
        """
        target = plan.target_dir
        result = InstallationResult(
            status=InstallStatus.INSTALLED,
            install_dir=target,
            degraded=plan.options.check_peer and self.peer is not None and plan.peer is None,
        )

        if plan.clear_target:
            _clear_directory(target)
        target.parent.mkdir(parents=True, exist_ok=True)

        self.tracker.start("clone", plan.options.repo_url)
        cloned = self.runner.run(["git", "clone", "--depth", "1", plan.options.repo_url, str(target)])
        if not cloned.ok:
            self.tracker.error("clone", cloned.summary())
            raise AcquisitionError(f"Failed to clone {plan.options.repo_url}: {cloned.summary()}")
        revision = self.runner.run(["git", "rev-parse", "--short", "HEAD"], cwd=target)
        source_version = revision.stdout.strip() if revision.ok else None
        self.tracker.complete("clone", source_version or "done")

        self.tracker.start("deps", "npm install")
        deps = self.runner.run(["npm", "install"], cwd=target)
        if not deps.ok:
            self.tracker.error("deps", deps.summary())
            raise DependencyInstallError(f"npm install failed: {deps.summary()}")
        self.tracker.complete("deps")

        self.tracker.start("build", "npm run build")
        build = self.runner.run(["npm", "run", "build"], cwd=target)
        if build.ok:
            result.build_ok = True
            self.tracker.complete("build")
        else:
            message = f"Build failed ({build.summary()}); the dashboard can still run in dev mode."
            result.warnings.append(message)
            self.tracker.warn("build", build.summary())
            logger.warning(message)

        self.tracker.start("record")
        record = InstallationRecord(
            install_dir=str(target),
            source_version=source_version,
            source_url=plan.options.repo_url,
        )
        save_record(record)
        result.record = record
        self.tracker.complete("record")
        return result

    def install(self, target_dir: Path, options: InstallOptions | None = None) -> InstallationResult:
        plan = self.prepare(target_dir, options)
        if plan is None:
            return InstallationResult(status=InstallStatus.CANCELLED, install_dir=target_dir)
        return self.execute(plan)


def _clear_directory(path: Path) -> None:
    for child in path.iterdir():
        if child.is_dir() and not child.is_symlink():
            shutil.rmtree(child)
        else:
            child.unlink()
    logger.info("Cleared existing contents of %s", path)


__all__ = [
    "INSTALL_STEPS",
    "InstallOptions",
    "InstallPlan",
    "InstallStatus",
    "InstallationResult",
    "Installer",
]
