"""Dashboard process commands."""

from __future__ import annotations

import webbrowser
from pathlib import Path
from typing import Optional

import typer

from superclaw_cli.cli.helpers import console, exit_with_error, printer
from superclaw_cli.core.constants import DEFAULT_DASHBOARD_PORT
from superclaw_cli.dashboard import (
    DashboardState,
    LaunchMode,
    LaunchOutcome,
    LaunchResult,
    ProcessLauncher,
    StopOutcome,
    StopResult,
    locate_dashboard,
)
from superclaw_cli.errors import SuperclawError

app = typer.Typer(
    name="dashboard",
    help="Start, stop and inspect the SuperClaw dashboard.",
    no_args_is_help=True,
)

DirOption = typer.Option(None, "--dir", "-d", help="Dashboard installation directory")
PortOption = typer.Option(DEFAULT_DASHBOARD_PORT, "--port", "-p", help="Port to serve the dashboard on")
DevOption = typer.Option(True, "--dev/--prod", help="Run 'npm run dev' (default) or 'npm start'")
BrowserOption = typer.Option(True, "--browser/--no-browser", help="Open the dashboard in a browser when ready")


def get_launcher() -> ProcessLauncher:
    return ProcessLauncher()


def _validate_port(port: int) -> None:
    if not (1 <= port <= 65535):
        printer.error("Invalid port specified. Use a value between 1 and 65535.")
        raise typer.Exit(1)


def open_browser(url: str) -> None:
    try:
        opened = webbrowser.open(url)
    except webbrowser.Error:
        opened = False
    if opened:
        printer.success("Opening dashboard in your browser...")
    else:
        printer.warn(f"Could not open a browser. Visit [cyan]{url}[/cyan] manually.")


def report_launch(result: LaunchResult, browser: bool) -> None:
    """A NOT_READY launch is reported as a warning, not a failure."""
    if result.outcome is LaunchOutcome.ALREADY_RUNNING:
        printer.warn(f"Dashboard is already running (PID {result.pid})")
        console.print("Use [cyan]superclaw dashboard restart[/cyan] to restart it")
        return

    if result.outcome is LaunchOutcome.READY:
        printer.success(f"Dashboard running at [cyan]{result.url}[/cyan] (PID {result.pid})")
        console.print(f"  [dim]Logs: {result.log_file}[/dim]")
        if browser:
            open_browser(result.url)
        return

    if result.exit_code is not None:
        printer.warn(f"Dashboard exited during startup with code {result.exit_code}.")
        console.print(f"  Check the log: [cyan]{result.log_file}[/cyan]")
        return

    printer.warn(f"Dashboard did not respond after {result.attempts} attempts (PID {result.pid}).")
    console.print(f"  It may still be starting. Check the log: [cyan]{result.log_file}[/cyan]")
    console.print(f"  Then visit [cyan]{result.url}[/cyan]")


def report_stop(result: StopResult) -> None:
    if result.outcome is StopOutcome.STOPPED:
        printer.success(f"Dashboard stopped (PID {result.pid})")
    elif result.outcome is StopOutcome.ALREADY_STOPPED:
        printer.warn("Dashboard process was not running. Cleared stale PID file.")
    else:
        printer.info("Dashboard is not running (no PID file)")


@app.command("start")
def start(
    dir: Optional[Path] = DirOption,
    port: int = PortOption,
    dev: bool = DevOption,
    browser: bool = BrowserOption,
) -> None:
    """Start the dashboard in the background and wait until it responds."""
    _validate_port(port)
    mode = LaunchMode.DEV if dev else LaunchMode.PROD
    try:
        install_dir = locate_dashboard(dir)
        printer.info(f"Starting dashboard ({mode.value}) from {install_dir} on port {port}...")
        result = get_launcher().start(install_dir, mode, port)
    except SuperclawError as exc:
        exit_with_error(exc)
    report_launch(result, browser)


@app.command("stop")
def stop(dir: Optional[Path] = DirOption) -> None:
    """Stop the running dashboard."""
    try:
        install_dir = locate_dashboard(dir)
        result = get_launcher().stop(install_dir)
    except SuperclawError as exc:
        exit_with_error(exc)
    report_stop(result)


@app.command("restart")
def restart(
    dir: Optional[Path] = DirOption,
    port: int = PortOption,
    dev: bool = DevOption,
    browser: bool = BrowserOption,
) -> None:
    """Stop the dashboard if it is running, then start it again."""
    _validate_port(port)
    mode = LaunchMode.DEV if dev else LaunchMode.PROD
    try:
        install_dir = locate_dashboard(dir)
        stopped, started = get_launcher().restart(install_dir, mode, port)
    except SuperclawError as exc:
        exit_with_error(exc)
    report_stop(stopped)
    report_launch(started, browser)


@app.command("status")
def status(dir: Optional[Path] = DirOption) -> None:
    """Show whether the dashboard process is running."""
    try:
        install_dir = locate_dashboard(dir)
    except SuperclawError as exc:
        exit_with_error(exc)

    launcher = get_launcher()
    state = launcher.status(install_dir)
    console.print(f"[bold]Directory:[/bold] {install_dir}")
    if state is DashboardState.RUNNING:
        printer.success(f"Dashboard is running (PID {launcher.read_pid(install_dir)})")
    elif state is DashboardState.STALE:
        printer.warn("Dashboard is not running (stale PID file cleared)")
    else:
        printer.info("Dashboard is not running")


__all__ = ["app", "get_launcher", "open_browser", "report_launch"]
