"""Memory commands: statistics, backup and cleanup of the daily logs."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.table import Table

from superclaw_cli.cli.commands import init as init_cmd
from superclaw_cli.cli.helpers import console, exit_with_error, printer, require_workspace
from superclaw_cli.errors import SuperclawError
from superclaw_cli.workspace.memory import (
    DEFAULT_RETENTION_DAYS,
    backup_memory,
    clean_memory,
    memory_stats,
)

app = typer.Typer(name="memory", help="Inspect, back up and clean the workspace memory.", no_args_is_help=True)

DirOption = typer.Option(None, "--dir", help="Workspace directory")


def _kb(size: int) -> str:
    return f"{size / 1024:.2f} KB"


@app.command("stats")
def stats(dir: Optional[Path] = DirOption) -> None:
    """Show daily log count, date range and size."""
    try:
        workspace = require_workspace(dir)
        result = memory_stats(workspace)
    except SuperclawError as exc:
        exit_with_error(exc)

    table = Table(title="Memory Statistics", show_header=False, expand=False)
    table.add_column("Item", style="cyan")
    table.add_column("Value")
    table.add_row("Daily files", str(result.daily_files))
    table.add_row("Archived files", str(result.archived_files))
    table.add_row("Total size", _kb(result.total_bytes))
    if result.first_date and result.last_date:
        table.add_row("Date range", f"{result.first_date} to {result.last_date}")
    if result.long_term_bytes is not None:
        table.add_row("MEMORY.md", f"{_kb(result.long_term_bytes)}, updated {result.long_term_updated}")
    else:
        table.add_row("MEMORY.md", "[yellow]missing[/yellow]")
    console.print(table)


@app.command("backup")
def backup(
    dir: Optional[Path] = DirOption,
    dest: Optional[Path] = typer.Option(None, "--dest", help="Parent directory for the backup"),
    include_archive: bool = typer.Option(False, "--include-archive", help="Also copy memory/archive"),
) -> None:
    """Copy the memory logs and MEMORY.md into a timestamped directory."""
    try:
        workspace = require_workspace(dir)
        target = backup_memory(workspace, dest=dest, include_archive=include_archive)
    except SuperclawError as exc:
        exit_with_error(exc)
    printer.success(f"Memory backup created: {target}")


@app.command("clean")
def clean(
    dir: Optional[Path] = DirOption,
    days: int = typer.Option(DEFAULT_RETENTION_DAYS, "--days", help="Keep logs newer than this many days"),
    delete: bool = typer.Option(False, "--delete", help="Delete old logs instead of archiving them"),
    dry_run: bool = typer.Option(False, "--dry-run", help="List what would be removed"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
) -> None:
    """Archive (or delete) daily logs older than the retention period."""
    try:
        workspace = require_workspace(dir)
        preview = clean_memory(workspace, days, archive=not delete, dry_run=True)
        if preview.count == 0:
            printer.info(f"No daily logs older than {preview.cutoff}.")
            return
        verb = "delete" if delete else "archive"
        for name in preview.archived + preview.deleted:
            console.print(f"  [dim]{name}[/dim]")
        if dry_run:
            printer.info(f"Would {verb} {preview.count} file(s).")
            return
        if not yes and not init_cmd.get_prompter().confirm(f"{verb.capitalize()} {preview.count} file(s)?", default=False):
            printer.info("Cleanup cancelled.")
            return
        result = clean_memory(workspace, days, archive=not delete)
    except SuperclawError as exc:
        exit_with_error(exc)

    if result.archived:
        printer.success(f"Archived {len(result.archived)} file(s) to memory/archive")
    if result.deleted:
        printer.success(f"Deleted {len(result.deleted)} file(s)")


__all__ = ["app"]
