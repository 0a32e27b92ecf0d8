"""Self-update for the CLI and in-place update of the dashboard checkout."""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import httpx
from packaging.version import InvalidVersion, Version

from superclaw_cli.errors import AcquisitionError, DependencyInstallError
from superclaw_cli.installer.runner import CommandRunner

logger = logging.getLogger(__name__)

PYPI_PROJECT = "superclaw-cli"
PYPI_JSON_URL = f"https://pypi.org/pypi/{PYPI_PROJECT}/json"


@dataclass
class CliUpdateInfo:
    current: str
    latest: Optional[str]

    @property
    def available(self) -> bool:
        if self.latest is None:
            return False
        try:
            return Version(self.latest) > Version(self.current)
        except InvalidVersion:
            return self.latest != self.current


@dataclass
class DashboardUpdateInfo:
    install_dir: Path
    local: Optional[str]
    remote: Optional[str]

    @property
    def available(self) -> bool:
        return bool(self.local and self.remote and self.local != self.remote)


@dataclass
class DashboardUpdateResult:
    before: Optional[str]
    after: Optional[str]
    build_ok: bool = True
    warnings: list[str] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return self.before != self.after


def latest_cli_version(client: httpx.Client | None = None, timeout: float = 10.0) -> Optional[str]:
    """Return the newest published version, or None when PyPI is unreachable."""
    owns_client = client is None
    client = client or httpx.Client(timeout=timeout)
    try:
        response = client.get(PYPI_JSON_URL, follow_redirects=True)
        if response.status_code != 200:
            logger.debug("PyPI returned %s for %s", response.status_code, PYPI_JSON_URL)
            return None
        return response.json().get("info", {}).get("version")
    except (httpx.HTTPError, ValueError) as exc:
        logger.debug("Could not query PyPI: %s", exc)
        return None
    finally:
        if owns_client:
            client.close()


def check_cli(current: str, client: httpx.Client | None = None) -> CliUpdateInfo:
    return CliUpdateInfo(current=current, latest=latest_cli_version(client))


def _rev(runner: CommandRunner, install_dir: Path, ref: str) -> Optional[str]:
    result = runner.run(["git", "rev-parse", "--short", ref], cwd=install_dir)
    return result.stdout.strip() if result.ok and result.stdout.strip() else None


def check_dashboard(install_dir: Path, runner: CommandRunner | None = None) -> DashboardUpdateInfo:
    runner = runner or CommandRunner()
    fetched = runner.run(["git", "fetch", "--quiet"], cwd=install_dir, timeout=60)
    if not fetched.ok:
        logger.debug("git fetch failed in %s: %s", install_dir, fetched.summary())
        return DashboardUpdateInfo(install_dir, _rev(runner, install_dir, "HEAD"), None)
    return DashboardUpdateInfo(
        install_dir,
        _rev(runner, install_dir, "HEAD"),
        _rev(runner, install_dir, "@{u}"),
    )


def upgrade_cli(runner: CommandRunner | None = None) -> bool:
    runner = runner or CommandRunner()
    result = runner.run([sys.executable, "-m", "pip", "install", "--upgrade", PYPI_PROJECT])
    if not result.ok:
        logger.warning("pip upgrade failed: %s", result.summary())
    return result.ok


def update_dashboard(install_dir: Path, runner: CommandRunner | None = None) -> DashboardUpdateResult:
    """Fast-forward the checkout, reinstall dependencies and rebuild.

    Raises:
        AcquisitionError: ``git pull`` failed.
        DependencyInstallError: ``npm install`` failed.
    """
    runner = runner or CommandRunner()
    before = _rev(runner, install_dir, "HEAD")

    pulled = runner.run(["git", "pull", "--ff-only"], cwd=install_dir, timeout=300)
    if not pulled.ok:
        raise AcquisitionError(
            f"git pull failed in {install_dir}: {pulled.summary()}",
            "Resolve local changes in the dashboard checkout, then run 'superclaw update' again.",
        )
    after = _rev(runner, install_dir, "HEAD")
    result = DashboardUpdateResult(before=before, after=after)

    deps = runner.run(["npm", "install"], cwd=install_dir)
    if not deps.ok:
        raise DependencyInstallError(f"npm install failed: {deps.summary()}")

    build = runner.run(["npm", "run", "build"], cwd=install_dir)
    if not build.ok:
        result.build_ok = False
        result.warnings.append(f"Build failed ({build.summary()}); rebuild manually with 'npm run build'.")
    return result


__all__ = [
    "CliUpdateInfo",
    "DashboardUpdateInfo",
    "DashboardUpdateResult",
    "PYPI_JSON_URL",
    "check_cli",
    "check_dashboard",
    "latest_cli_version",
    "update_dashboard",
    "upgrade_cli",
]
