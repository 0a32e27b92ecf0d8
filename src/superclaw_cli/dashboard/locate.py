"""Find the dashboard installation directory."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Optional

from superclaw_cli.core.constants import DASHBOARD_PACKAGE_NAME
from superclaw_cli.core.home import DASHBOARD_DIR_ENV, find_workspace, get_data_dir
from superclaw_cli.errors import LaunchError
from superclaw_cli.installer.record import has_record
from superclaw_cli.workspace.config import ConfigError, load_config

logger = logging.getLogger(__name__)


def is_dashboard_dir(path: Path) -> bool:
    """True when *path* holds an installation record or the dashboard package."""
    if not path.is_dir():
        return False
    if has_record(path):
        return True
    package_json = path / "package.json"
    if not package_json.is_file():
        return False
    try:
        data = json.loads(package_json.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return False
    return isinstance(data, dict) and data.get("name") == DASHBOARD_PACKAGE_NAME


def _configured_dir(workspace: Optional[Path]) -> Optional[Path]:
    workspace = workspace or find_workspace()
    if workspace is None:
        return None
    try:
        config = load_config(workspace)
    except (FileNotFoundError, ConfigError) as exc:
        logger.debug("No usable workspace config for dashboard lookup: %s", exc)
        return None
    if config.dashboard and config.dashboard.install_dir:
        return Path(config.dashboard.install_dir).expanduser()
    return None


def dashboard_candidates(explicit: Optional[Path] = None, workspace: Optional[Path] = None) -> list[Path]:
    candidates: list[Path] = []
    if explicit is not None:
        return [explicit.expanduser()]
    if env_dir := os.environ.get(DASHBOARD_DIR_ENV):
        candidates.append(Path(env_dir).expanduser())
    if configured := _configured_dir(workspace):
        candidates.append(configured)
    candidates.append(get_data_dir() / "dashboard")
    return candidates


def locate_dashboard(explicit: Optional[Path] = None, workspace: Optional[Path] = None) -> Path:
    """Return the first qualifying dashboard directory.

    Raises:
        LaunchError: none of the candidates is a dashboard installation.
    """
    candidates = dashboard_candidates(explicit, workspace)
    for candidate in candidates:
        if is_dashboard_dir(candidate):
            return candidate.resolve()

    if explicit is not None:
        raise LaunchError(
            f"{explicit} is not a SuperClaw dashboard installation.",
            "Point --dir at the directory created by 'superclaw init'.",
        )
    searched = ", ".join(str(c) for c in candidates)
    raise LaunchError(
        f"Could not find the SuperClaw dashboard (searched: {searched}).",
        f"Use --dir or set {DASHBOARD_DIR_ENV} to the dashboard location.",
    )


__all__ = ["dashboard_candidates", "is_dashboard_dir", "locate_dashboard"]
