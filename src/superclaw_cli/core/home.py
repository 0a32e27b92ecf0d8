"""Data directory and workspace discovery.

Provides the canonical functions for locating:
- The per-user data directory (~/.superclaw/ or the platform equivalent)
- The operator workspace holding SOUL.md and superclaw-config.json
- The default dashboard installation directory
"""

from __future__ import annotations

import os
from pathlib import Path

from superclaw_cli.core.constants import CONFIG_FILENAME, DEFAULT_WORKSPACE_NAME, USER_DB_FILENAME

DATA_DIR_ENV = "SUPERCLAW_DATA_DIR"
WORKSPACE_ENV = "SUPERCLAW_WORKSPACE"
DASHBOARD_DIR_ENV = "SUPERCLAW_DASHBOARD_DIR"


def _is_windows() -> bool:
    """Return True when running on Windows."""
    return os.name == "nt"


def get_data_dir() -> Path:
    """Return the per-user SuperClaw data directory.

    Resolution order:
    1. SUPERCLAW_DATA_DIR environment variable (all platforms)
    2. ~/.superclaw/ on macOS/Linux
    3. %LOCALAPPDATA%\\superclaw\\ on Windows (via platformdirs)
    """
    if env_dir := os.environ.get(DATA_DIR_ENV):
        return Path(env_dir).expanduser()

    if _is_windows():
        from platformdirs import user_data_dir

        return Path(user_data_dir("superclaw"))

    return Path.home() / ".superclaw"


def get_user_db_path() -> Path:
    """Return the path of the embedded user database."""
    return get_data_dir() / USER_DB_FILENAME


def get_default_dashboard_dir() -> Path:
    """Return where ``init`` installs the dashboard when no --dashboard-dir is given."""
    if env_dir := os.environ.get(DASHBOARD_DIR_ENV):
        return Path(env_dir).expanduser()
    return get_data_dir() / "dashboard"


def default_workspace_candidates(cwd: Path | None = None) -> list[Path]:
    """Directories probed, in order, when no workspace is given explicitly."""
    cwd = cwd or Path.cwd()
    candidates: list[Path] = []
    if env_dir := os.environ.get(WORKSPACE_ENV):
        candidates.append(Path(env_dir).expanduser())
    candidates.extend(
        [
            cwd,
            cwd / DEFAULT_WORKSPACE_NAME,
            cwd.parent / DEFAULT_WORKSPACE_NAME,
            Path.home() / DEFAULT_WORKSPACE_NAME,
        ]
    )
    return candidates


def find_workspace(explicit: Path | None = None, cwd: Path | None = None) -> Path | None:
    """Return the first directory holding a configuration document, or None.

    An explicit directory is returned as-is when it exists, even without a
    configuration document, so diagnostics can report what is missing.
    """
    if explicit is not None:
        explicit = explicit.expanduser().resolve()
        return explicit if explicit.is_dir() else None

    for candidate in default_workspace_candidates(cwd):
        if (candidate / CONFIG_FILENAME).is_file():
            return candidate.resolve()
    return None


__all__ = [
    "DATA_DIR_ENV",
    "WORKSPACE_ENV",
    "DASHBOARD_DIR_ENV",
    "get_data_dir",
    "get_user_db_path",
    "get_default_dashboard_dir",
    "default_workspace_candidates",
    "find_workspace",
]
