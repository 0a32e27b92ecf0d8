"""Update command: CLI self-update and dashboard refresh."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from superclaw_cli import updater
from superclaw_cli.cli.commands import init as init_cmd
from superclaw_cli.cli.helpers import console, exit_with_error, printer
from superclaw_cli.dashboard import locate_dashboard
from superclaw_cli.errors import LaunchError, SuperclawError


def _current_version() -> str:
    from superclaw_cli import __version__

    return __version__


def _find_dashboard(dir: Optional[Path]) -> Optional[Path]:
    try:
        return locate_dashboard(dir)
    except LaunchError:
        if dir is not None:
            raise
        return None


def update(
    check: bool = typer.Option(False, "--check", "-c", help="Only report available updates"),
    dir: Optional[Path] = typer.Option(None, "--dir", "-d", help="Dashboard installation directory"),
) -> None:
    """Update the CLI and the installed dashboard."""
    runner = init_cmd.get_runner()
    try:
        install_dir = _find_dashboard(dir)
    except SuperclawError as exc:
        exit_with_error(exc)

    if check:
        cli = updater.check_cli(_current_version())
        if cli.latest is None:
            printer.info("CLI: could not check for updates")
        elif cli.available:
            printer.warn(f"CLI: v{cli.current} → v{cli.latest} available")
        else:
            printer.success(f"CLI: v{cli.current} (latest)")

        if install_dir is None:
            printer.info("Dashboard: not installed")
            return
        dash = updater.check_dashboard(install_dir, runner)
        if dash.remote is None:
            printer.info("Dashboard: could not check for updates")
        elif dash.available:
            printer.warn(f"Dashboard: {dash.local} → {dash.remote} available")
        else:
            printer.success(f"Dashboard: {dash.local} (latest)")
        console.print("\nRun [cyan]superclaw update[/cyan] to install updates.")
        return

    printer.heading("Updating SuperClaw")
    if updater.upgrade_cli(runner):
        printer.success("CLI updated")
    else:
        printer.warn("Could not update the CLI. Try: pip install --upgrade superclaw-cli")

    if install_dir is None:
        printer.info("No dashboard installation found; skipping dashboard update.")
        return

    try:
        result = updater.update_dashboard(install_dir, runner)
    except SuperclawError as exc:
        exit_with_error(exc)

    if result.changed:
        printer.success(f"Dashboard updated {result.before} → {result.after}")
    else:
        printer.success(f"Dashboard already at latest version ({result.after})")
    for warning in result.warnings:
        printer.warn(warning)
    console.print("Restart the dashboard to apply: [cyan]superclaw dashboard restart[/cyan]")


__all__ = ["update"]
