"""Shared console, banner and error plumbing for commands."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import NoReturn, Optional

import typer
from rich.align import Align
from rich.console import Console
from rich.text import Text
from typer.core import TyperGroup

from superclaw_cli.core.home import find_workspace
from superclaw_cli.errors import SuperclawError, WorkspaceNotFound

from .ui import Printer

BANNER = r"""
  ___                    ___ _
 / __|_  _ _ __  ___ _ _/ __| |__ ___ __ __
 \__ \ || | '_ \/ -_) '_| (__| / _` \ V  V /
 |___/\_,_| .__/\___|_|  \___|_\__,_|\_/\_/
          |_|
"""

TAGLINE = "Set up your AI workspace and dashboard"

console = Console()
printer = Printer(console)


def show_banner() -> None:
    """Display the ASCII art banner."""
    banner_lines = BANNER.strip("\n").split("\n")
    colors = ["bright_red", "red", "bright_magenta", "magenta", "bright_white"]

    styled_banner = Text()
    for i, line in enumerate(banner_lines):
        styled_banner.append(line + "\n", style=colors[i % len(colors)])

    console.print(Align.center(styled_banner))
    console.print(Align.center(Text(TAGLINE, style="italic bright_yellow")))
    console.print()


class BannerGroup(TyperGroup):
    """Custom group that shows banner before help."""

    def format_help(self, ctx, formatter):
        show_banner()
        super().format_help(ctx, formatter)


def configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    logging.getLogger().setLevel(level)


def exit_with_error(exc: SuperclawError, out: Printer | None = None) -> NoReturn:
    """Print the cause and its remediation, then exit with status 1."""
    out = out or printer
    out.error(exc.message)
    if exc.remediation:
        out.print(f"  [cyan]→ {exc.remediation}[/cyan]")
    raise typer.Exit(1)


def require_workspace(explicit: Optional[Path] = None) -> Path:
    workspace = find_workspace(explicit)
    if workspace is None:
        if explicit is not None:
            raise WorkspaceNotFound(f"Workspace directory {explicit} does not exist.")
        raise WorkspaceNotFound("No SuperClaw workspace found.")
    return workspace


__all__ = [
    "BANNER",
    "BannerGroup",
    "configure_logging",
    "console",
    "exit_with_error",
    "printer",
    "require_workspace",
    "show_banner",
]
