#!/usr/bin/env python3
"""
SuperClaw CLI - set up an AI workspace and its dashboard

Usage:
    superclaw init
    superclaw setup
    superclaw dashboard start

Or install globally:
    pip install superclaw-cli
    superclaw init
"""

__version__ = "1.0.0"

from typing import Optional

import typer
from rich.align import Align

from superclaw_cli.cli.commands import register_commands
from superclaw_cli.cli.helpers import BannerGroup, configure_logging, console, show_banner

app = typer.Typer(
    name="superclaw",
    help="Set up SuperClaw workspaces, install the dashboard and manage its users",
    add_completion=False,
    invoke_without_command=True,
    cls=BannerGroup,
)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"superclaw {__version__}")
        raise typer.Exit()


@app.callback()
def callback(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit",
    ),
) -> None:
    """Show banner when no subcommand is provided."""
    configure_logging(verbose)
    if ctx.invoked_subcommand is None:
        show_banner()
        console.print(Align.center("[dim]Run 'superclaw --help' for usage information[/dim]"))
        console.print()


register_commands(app)


def main():
    app()


if __name__ == "__main__":
    main()
