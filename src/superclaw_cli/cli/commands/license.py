"""License commands for the dashboard tier."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from superclaw_cli.cli.helpers import console, exit_with_error, printer
from superclaw_cli.dashboard import locate_dashboard
from superclaw_cli.errors import SuperclawError
from superclaw_cli.license import CHECKOUT_URL, activate, current_tier

app = typer.Typer(name="license", help="Show or activate the SuperClaw Pro license.", no_args_is_help=True)

DirOption = typer.Option(None, "--dir", "-d", help="Dashboard installation directory")


@app.command("status")
def status(dir: Optional[Path] = DirOption) -> None:
    """Show the license tier of the installed dashboard."""
    try:
        install_dir = locate_dashboard(dir)
        tier = current_tier(install_dir)
    except SuperclawError as exc:
        exit_with_error(exc)

    if tier == "pro":
        printer.success("Status: [green]Pro[/green]")
        return
    printer.info("Status: Free")
    console.print(f"\nUpgrade to Pro: [cyan]{CHECKOUT_URL}[/cyan]")
    console.print("Then run: [cyan]superclaw license install <key>[/cyan]")


@app.command("install")
def install(
    key: str = typer.Argument(..., help="License key"),
    dir: Optional[Path] = DirOption,
) -> None:
    """Validate a license key and switch the installation to the Pro tier."""
    try:
        install_dir = locate_dashboard(dir)
        record = activate(install_dir, key)
    except SuperclawError as exc:
        exit_with_error(exc)
    printer.success(f"License valid. {install_dir} is now on the Pro tier.")
    console.print(f"[dim]Activated at {record.license_activated_at}[/dim]")
    console.print("Restart the dashboard to see Pro features: [cyan]superclaw dashboard restart[/cyan]")


__all__ = ["app"]
