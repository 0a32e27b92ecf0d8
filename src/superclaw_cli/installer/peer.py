"""Optional probe of the OpenClaw gateway the dashboard pairs with.

The gateway is never required. When it cannot be queried the caller gets
``None`` and decides what to do; the filesystem fallback for its workspace
is an explicit policy in ``resolve_peer_workspace`` rather than a side effect
of a failed probe.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol

from superclaw_cli.installer.runner import CommandRunner

logger = logging.getLogger(__name__)

PEER_WORKSPACE_ENV = "OPENCLAW_WORKSPACE"
PEER_COMMAND = "openclaw"


@dataclass(frozen=True)
class PeerStatus:
    workspace: Optional[Path]
    version: Optional[str] = None


class PeerStatusProvider(Protocol):
    def status(self) -> Optional[PeerStatus]:
        """Return the peer's status, or None when it is not reachable."""
        ...


class OpenClawStatusProvider:
    """Query ``openclaw status --json``."""

    def __init__(self, runner: CommandRunner | None = None):
        self.runner = runner or CommandRunner()

    def status(self) -> Optional[PeerStatus]:
        if self.runner.which(PEER_COMMAND) is None:
            logger.debug("%s not on PATH", PEER_COMMAND)
            return None
        result = self.runner.run([PEER_COMMAND, "status", "--json"], timeout=15)
        if not result.ok:
            logger.debug("%s status failed: %s", PEER_COMMAND, result.summary())
            return None
        try:
            data = json.loads(result.stdout)
        except json.JSONDecodeError:
            logger.debug("%s status returned non-JSON output", PEER_COMMAND)
            return None
        if not isinstance(data, dict):
            return None
        workspace = data.get("workspace")
        return PeerStatus(
            workspace=Path(workspace).expanduser() if workspace else None,
            version=data.get("version"),
        )


def default_peer_workspace() -> Path:
    return Path.home() / ".openclaw" / "workspace"


def resolve_peer_workspace(provider: PeerStatusProvider | None = None) -> Path:
    """Return the peer workspace path.

    Order: ``OPENCLAW_WORKSPACE``, then the workspace reported by the running
    gateway, then ``~/.openclaw/workspace``.
    """
    if env_dir := os.environ.get(PEER_WORKSPACE_ENV):
        return Path(env_dir).expanduser()
    if provider is not None:
        status = provider.status()
        if status is not None and status.workspace is not None:
            return status.workspace
    return default_peer_workspace()


__all__ = [
    "PEER_WORKSPACE_ENV",
    "PeerStatus",
    "PeerStatusProvider",
    "OpenClawStatusProvider",
    "default_peer_workspace",
    "resolve_peer_workspace",
]
