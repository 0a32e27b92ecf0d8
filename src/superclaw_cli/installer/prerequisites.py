"""Host tool checks run before anything is written to disk."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from superclaw_cli.core.constants import MIN_NODE_MAJOR
from superclaw_cli.errors import PreconditionError
from superclaw_cli.installer.runner import CommandRunner

_NODE_VERSION_RE = re.compile(r"v?(\d+)\.(\d+)\.(\d+)")


@dataclass(frozen=True)
class NodeVersion:
    major: int
    minor: int
    patch: int

    def __str__(self) -> str:
        return f"v{self.major}.{self.minor}.{self.patch}"


def parse_node_version(output: str) -> Optional[NodeVersion]:
    """Parse ``node --version`` output such as ``v20.11.1``."""
    match = _NODE_VERSION_RE.search(output.strip())
    if not match:
        return None
    major, minor, patch = (int(part) for part in match.groups())
    return NodeVersion(major, minor, patch)


def detect_node_version(runner: CommandRunner) -> Optional[NodeVersion]:
    if runner.which("node") is None:
        return None
    result = runner.run(["node", "--version"], timeout=15)
    if not result.ok:
        return None
    return parse_node_version(result.stdout)


def require_node(runner: CommandRunner, minimum: int = MIN_NODE_MAJOR) -> NodeVersion:
    version = detect_node_version(runner)
    if version is None:
        raise PreconditionError(
            "Node.js is not installed.",
            f"Install Node.js {minimum} or newer from https://nodejs.org/",
        )
    if version.major < minimum:
        raise PreconditionError(
            f"Node.js {version} detected; version {minimum}+ is required.",
            f"Upgrade Node.js to {minimum} or newer: https://nodejs.org/",
        )
    return version


def require_tool(runner: CommandRunner, tool: str, install_hint: str) -> str:
    path = runner.which(tool)
    if path is None:
        raise PreconditionError(f"{tool} is not installed or not on PATH.", install_hint)
    return path


def check_prerequisites(runner: CommandRunner) -> NodeVersion:
    """Verify node, git and npm; raise ``PreconditionError`` on the first gap."""
    version = require_node(runner)
    require_tool(runner, "git", "Install git from https://git-scm.com/downloads")
    require_tool(runner, "npm", "npm ships with Node.js; reinstall Node.js from https://nodejs.org/")
    return version


__all__ = [
    "NodeVersion",
    "parse_node_version",
    "detect_node_version",
    "require_node",
    "require_tool",
    "check_prerequisites",
]
