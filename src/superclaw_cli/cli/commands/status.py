"""Status command: a quick summary of workspace, dashboard and users."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.table import Table

from superclaw_cli.cli.commands import dashboard as dashboard_cmd
from superclaw_cli.cli.helpers import console, exit_with_error, printer, require_workspace
from superclaw_cli.core.constants import (
    AGENTS_FILENAME,
    CONFIG_FILENAME,
    MEMORY_DIR,
    MEMORY_FILENAME,
    SOUL_FILENAME,
    USER_PROFILE_FILENAME,
)
from superclaw_cli.core.home import get_user_db_path
from superclaw_cli.dashboard import DashboardState, locate_dashboard
from superclaw_cli.errors import LaunchError, StoreError, SuperclawError
from superclaw_cli.installer import load_record
from superclaw_cli.users import open_user_store
from superclaw_cli.workspace import ConfigError, load_config

WORKSPACE_FILES = (
    (CONFIG_FILENAME, "Configuration"),
    (SOUL_FILENAME, "AI Personality"),
    (USER_PROFILE_FILENAME, "User Profile"),
    (AGENTS_FILENAME, "Agent Instructions"),
    (MEMORY_FILENAME, "Long-term Memory"),
)


def _file_rows(workspace: Path) -> tuple[list[tuple[str, str]], bool]:
    rows = []
    all_present = True
    for filename, label in WORKSPACE_FILES:
        path = workspace / filename
        if path.is_file():
            rows.append((label, f"[green]✓[/green] {path.stat().st_size / 1024:.1f}KB"))
        else:
            rows.append((label, "[red]✗ missing[/red]"))
            all_present = False
    memory_dir = workspace / MEMORY_DIR
    if memory_dir.is_dir():
        daily = sorted(p.stem for p in memory_dir.glob("*.md"))
        detail = f"{len(daily)} file(s)"
        if daily:
            detail += f" ({daily[0]} to {daily[-1]})"
        rows.append(("Daily memory", f"[green]✓[/green] {detail}"))
    else:
        rows.append(("Daily memory", "[yellow]! missing[/yellow]"))
    return rows, all_present


def status(dir: Optional[Path] = typer.Option(None, "--dir", help="Workspace directory")) -> None:
    """Show a summary of the workspace, dashboard and user store."""
    try:
        workspace = require_workspace(dir)
    except SuperclawError as exc:
        exit_with_error(exc)

    table = Table(title=f"SuperClaw Status: {workspace}", show_header=False, expand=False)
    table.add_column("Item", style="cyan")
    table.add_column("Value")

    rows, all_good = _file_rows(workspace)
    for label, value in rows:
        table.add_row(label, value)

    config = None
    try:
        config = load_config(workspace)
    except (FileNotFoundError, ConfigError):
        all_good = False
    if config is not None:
        table.add_row("AI", f"{config.ai.name} ({config.ai.personality})")
        table.add_row("Operator", f"{config.user.name or 'unknown'} ({config.user.role})")
        table.add_row("Backend", config.backend)
        enabled = [name for name, settings in config.channels.items() if settings.get("enabled")]
        table.add_row("Channels", f"{len(enabled)} enabled / {len(config.channels)} configured")

    try:
        install_dir = locate_dashboard(workspace=workspace)
    except LaunchError:
        table.add_row("Dashboard", "[yellow]not installed[/yellow]")
    else:
        try:
            record = load_record(install_dir)
            tier = record.tier if record else "free"
        except SuperclawError:
            tier = "unknown"
        state = dashboard_cmd.get_launcher().status(install_dir)
        style = "green" if state is DashboardState.RUNNING else "yellow"
        table.add_row("Dashboard", f"[{style}]{state.value}[/{style}] ({install_dir}, tier {tier})")

    try:
        count = open_user_store().count_users()
        table.add_row("Users", str(count))
    except StoreError:
        table.add_row("Users", f"[yellow]no database at {get_user_db_path()}[/yellow]")

    console.print(table)
    if all_good:
        printer.success("All systems operational")
    else:
        printer.warn("Some issues detected. Run 'superclaw doctor' for troubleshooting help.")


__all__ = ["status"]
