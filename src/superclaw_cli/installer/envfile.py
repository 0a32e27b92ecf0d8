"""Keep the dashboard's ``.env`` pointed at the OpenClaw workspace."""

from __future__ import annotations

import logging
import re
from enum import StrEnum
from pathlib import Path

from superclaw_cli.core.atomic import atomic_write_text
from superclaw_cli.errors import SuperclawError
from superclaw_cli.installer.peer import PEER_WORKSPACE_ENV

logger = logging.getLogger(__name__)

ENV_FILENAME = ".env"


class EnvChange(StrEnum):
    CREATED = "created"
    ADDED = "added"
    UPDATED = "updated"
    UNCHANGED = "unchanged"


def env_path(install_dir: Path) -> Path:
    return install_dir / ENV_FILENAME


def set_env_value(path: Path, key: str, value: str) -> EnvChange:
    """Create, append to, or rewrite *path* so that ``key=value`` holds.

    Other lines are left untouched. Only the first assignment of *key* is
    rewritten.
    """
    line = f"{key}={value}"
    try:
        existing = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        atomic_write_text(path, line + "\n")
        return EnvChange.CREATED
    except (OSError, UnicodeDecodeError) as exc:
        raise SuperclawError(
            f"Could not read {path}: {exc}",
            f"Fix or remove {path} and re-run 'superclaw fix-env'.",
        ) from exc

    pattern = re.compile(rf"^{re.escape(key)}=(.*)$", re.MULTILINE)
    match = pattern.search(existing)
    if match is None:
        separator = "" if not existing or existing.endswith("\n") else "\n"
        atomic_write_text(path, f"{existing}{separator}{line}\n")
        return EnvChange.ADDED
    if match.group(1).strip() == value:
        return EnvChange.UNCHANGED
    atomic_write_text(path, existing[: match.start()] + line + existing[match.end() :])
    logger.info("Rewrote %s in %s", key, path)
    return EnvChange.UPDATED


def write_peer_workspace(install_dir: Path, workspace: Path) -> EnvChange:
    return set_env_value(env_path(install_dir), PEER_WORKSPACE_ENV, str(workspace))


__all__ = ["ENV_FILENAME", "EnvChange", "env_path", "set_env_value", "write_peer_workspace"]
