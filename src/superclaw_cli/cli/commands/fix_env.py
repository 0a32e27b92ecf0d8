"""Point the dashboard's ``.env`` at the OpenClaw workspace."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from superclaw_cli.cli.commands import init as init_cmd
from superclaw_cli.cli.helpers import console, exit_with_error, printer
from superclaw_cli.dashboard import locate_dashboard
from superclaw_cli.errors import PreconditionError, SuperclawError
from superclaw_cli.installer import EnvChange, resolve_peer_workspace, write_peer_workspace
from superclaw_cli.installer.envfile import env_path

_MESSAGES = {
    EnvChange.CREATED: "Created {path}",
    EnvChange.ADDED: "Added OPENCLAW_WORKSPACE to {path}",
    EnvChange.UPDATED: "Updated OPENCLAW_WORKSPACE in {path}",
    EnvChange.UNCHANGED: "{path} already configured correctly",
}


def fix_env(
    dir: Optional[Path] = typer.Option(None, "--dir", "-d", help="Dashboard installation directory"),
) -> None:
    """Write OPENCLAW_WORKSPACE into the dashboard's .env file."""
    printer.heading("SuperClaw Environment Fix")
    try:
        workspace = resolve_peer_workspace(init_cmd.get_peer_provider(init_cmd.get_runner()))
        if not workspace.is_dir():
            raise PreconditionError(
                f"OpenClaw workspace not found at {workspace}",
                "Start OpenClaw with 'openclaw gateway start' or set OPENCLAW_WORKSPACE.",
            )
        printer.success(f"Found OpenClaw workspace: {workspace}")
        install_dir = locate_dashboard(dir)
        printer.success(f"Found dashboard: {install_dir}")
        change = write_peer_workspace(install_dir, workspace)
    except SuperclawError as exc:
        exit_with_error(exc)

    printer.success(_MESSAGES[change].format(path=env_path(install_dir)))
    if change is EnvChange.UNCHANGED:
        return
    console.print(f"\nDashboard now uses [cyan]{workspace}[/cyan]")
    console.print("Restart it to apply: [cyan]superclaw dashboard restart[/cyan]")


__all__ = ["fix_env"]
