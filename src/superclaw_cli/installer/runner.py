"""Subprocess wrapper used by the installer, updater and diagnostics."""

from __future__ import annotations

import logging
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional, Sequence

logger = logging.getLogger(__name__)


@dataclass
class CommandResult:
    """Normalized outcome of an external command."""

    args: list[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    def summary(self) -> str:
        """Last non-empty line of stderr (or stdout) for short error messages."""
        for stream in (self.stderr, self.stdout):
            lines = [line.strip() for line in stream.splitlines() if line.strip()]
            if lines:
                return lines[-1]
        return f"exit code {self.returncode}"


class CommandRunner:
    """Run external programs and normalize failures into ``CommandResult``.

    A missing executable maps to return code 127 and a timeout to 124, so
    callers never have to catch ``FileNotFoundError`` themselves.
    """

    def which(self, tool: str) -> Optional[str]:
        return shutil.which(tool)

    def run(
        self,
        cmd: Sequence[str],
        cwd: Optional[Path] = None,
        env: Optional[Mapping[str, str]] = None,
        timeout: Optional[float] = None,
    ) -> CommandResult:
        args = [str(part) for part in cmd]
        logger.debug("Running %s (cwd=%s)", " ".join(args), cwd)
        try:
            completed = subprocess.run(
                args,
                cwd=str(cwd) if cwd else None,
                env=dict(env) if env is not None else None,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                check=False,
                timeout=timeout,
            )
        except FileNotFoundError:
            return CommandResult(args, 127, "", f"{args[0]} executable not found on PATH")
        except subprocess.TimeoutExpired:
            return CommandResult(args, 124, "", f"command timed out: {' '.join(args)}")

        result = CommandResult(args, completed.returncode, completed.stdout or "", completed.stderr or "")
        if not result.ok:
            logger.debug("Command failed (%s): %s", result.returncode, result.summary())
        return result


__all__ = ["CommandResult", "CommandRunner"]
