"""Init command: workspace, dashboard install, admin account, first start."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.live import Live
from rich.panel import Panel

from superclaw_cli.cli.commands import dashboard as dashboard_cmd
from superclaw_cli.cli.commands import setup as setup_cmd
from superclaw_cli.cli.helpers import console, exit_with_error, printer
from superclaw_cli.cli.prompts import Prompter, TyperPrompter
from superclaw_cli.cli.questions import BACKEND_CHOICES, ask_identity, ask_operator
from superclaw_cli.cli.ui import StepTracker
from superclaw_cli.core.constants import (
    CONFIG_FILENAME,
    DEFAULT_DASHBOARD_PORT,
    DEFAULT_DASHBOARD_REPO,
    DEFAULT_WORKSPACE_NAME,
)
from superclaw_cli.core.home import get_default_dashboard_dir
from superclaw_cli.dashboard import LaunchMode
from superclaw_cli.errors import SuperclawError
from superclaw_cli.installer import (
    CommandRunner,
    InstallationResult,
    Installer,
    InstallOptions,
    OpenClawStatusProvider,
    PeerStatusProvider,
    resolve_peer_workspace,
    write_peer_workspace,
)
from superclaw_cli.users import AdminProvisioner, open_user_store
from superclaw_cli.workspace import create_workspace, load_config, save_config
from superclaw_cli.workspace.config import DashboardConfig

logger = logging.getLogger(__name__)


def get_runner() -> CommandRunner:
    return CommandRunner()


def get_peer_provider(runner: CommandRunner) -> PeerStatusProvider:
    return OpenClawStatusProvider(runner)


def get_prompter() -> Prompter:
    return TyperPrompter(console)


def _choose_workspace(prompter: Prompter, explicit: Optional[Path]) -> Optional[Path]:
    if explicit is None:
        answer = prompter.ask("Where would you like to create your AI workspace?", default=f"./{DEFAULT_WORKSPACE_NAME}")
        explicit = Path(answer or DEFAULT_WORKSPACE_NAME)
    workspace = explicit.expanduser().resolve()
    if (workspace / CONFIG_FILENAME).exists():
        if not prompter.confirm(f"A workspace already exists in {workspace}. Update it?", default=False):
            return None
    return workspace


def _install_dashboard(
    installer: Installer,
    target: Path,
    options: InstallOptions,
) -> Optional[InstallationResult]:
    plan = installer.prepare(target, options)
    if plan is None:
        return None
    try:
        with Live(installer.tracker.render(), console=console, refresh_per_second=8, transient=True) as live:
            installer.tracker.attach_refresh(lambda: live.update(installer.tracker.render()))
            result = installer.execute(plan)
    finally:
        # Final static tree, including the failed step when execute raised
        console.print(installer.tracker.render())
    for warning in result.warnings:
        printer.warn(warning)
    return result


def _link_peer_workspace(peer: PeerStatusProvider, install_dir: Path) -> None:
    peer_workspace = resolve_peer_workspace(peer)
    if not peer_workspace.is_dir():
        printer.warn(f"OpenClaw workspace {peer_workspace} not found; run 'superclaw fix-env' once it exists.")
        return
    write_peer_workspace(install_dir, peer_workspace)
    printer.success(f"Dashboard linked to OpenClaw workspace {peer_workspace}")


def _provision_admin(prompter: Prompter) -> bool:
    store = open_user_store(create=True, hasher=setup_cmd.store_hasher())
    if store.count_users() > 0:
        printer.info(f"{store.count_users()} dashboard user(s) already exist; skipping admin setup.")
        return True
    if not prompter.confirm("Create the dashboard admin account now?", default=True):
        printer.info("Skipped. Run 'superclaw setup' later to create the admin account.")
        return False
    result = AdminProvisioner(store, prompter, printer).run()
    if not result.succeeded:
        return False
    body = f"[bold]Email:[/bold]    {result.email}\n[bold]Password:[/bold] [yellow]{result.password}[/yellow]"
    console.print(Panel(body, title="Admin account", border_style="green", expand=False))
    printer.warn("Save this password now. It will not be shown again.")
    return True


def init(
    dir: Optional[Path] = typer.Option(None, "--dir", help="Workspace directory (prompted when omitted)"),
    dashboard_dir: Optional[Path] = typer.Option(None, "--dashboard-dir", help="Where to install the dashboard"),
    repo: str = typer.Option(DEFAULT_DASHBOARD_REPO, "--repo", help="Dashboard git repository URL"),
    force: bool = typer.Option(False, "--force", help="Clear a non-empty dashboard directory without asking"),
    skip_dashboard: bool = typer.Option(False, "--skip-dashboard", help="Only create the workspace files"),
    no_start: bool = typer.Option(False, "--no-start", help="Do not start the dashboard after installing"),
    port: int = typer.Option(DEFAULT_DASHBOARD_PORT, "--port", help="Dashboard port"),
    browser: bool = typer.Option(True, "--browser/--no-browser", help="Open the dashboard when it is ready"),
) -> None:
    """Create a SuperClaw workspace and install the dashboard."""
    prompter = get_prompter()
    runner = get_runner()
    peer = get_peer_provider(runner)

    printer.heading("SuperClaw Setup")
    try:
        workspace = _choose_workspace(prompter, dir)
        if workspace is None:
            printer.info("Setup cancelled.")
            return

        peer_status = peer.status()
        default_backend = "openclaw" if peer_status is not None else "other"
        backend = prompter.choose("Which AI backend will you use?", BACKEND_CHOICES, default=default_backend)
        identity = ask_identity(prompter)
        operator = ask_operator(prompter)

        files = create_workspace(workspace, identity, operator, backend=backend)
        printer.success(f"Workspace created at {files.root}")
        for path in files.all_paths():
            console.print(f"  [dim]{path.relative_to(files.root)}[/dim]")

        if skip_dashboard:
            printer.info("Skipping dashboard installation (--skip-dashboard).")
            return

        target = (dashboard_dir or get_default_dashboard_dir()).expanduser().resolve()
        installer = Installer(
            runner=runner,
            prompter=prompter,
            printer=printer,
            peer=peer if backend == "openclaw" else None,
            tracker=StepTracker("Install SuperClaw Dashboard"),
        )
        result = _install_dashboard(installer, target, InstallOptions(repo_url=repo, clear_existing=force))
        if result is None:
            printer.info("Dashboard installation cancelled. Your workspace files were kept.")
            return

        config = load_config(workspace)
        config.dashboard = DashboardConfig(install_dir=str(result.install_dir), port=port)
        save_config(workspace, config)
        printer.success(f"Dashboard installed in {result.install_dir}")
        if backend == "openclaw":
            _link_peer_workspace(peer, result.install_dir)

        _provision_admin(prompter)

        if no_start:
            console.print(f"\nStart it later with: [cyan]superclaw dashboard start --port {port}[/cyan]")
            return

        mode = LaunchMode.PROD if result.build_ok else LaunchMode.DEV
        launch = dashboard_cmd.get_launcher().start(result.install_dir, mode, port)
    except SuperclawError as exc:
        exit_with_error(exc)

    dashboard_cmd.report_launch(launch, browser)


__all__ = ["init", "get_runner", "get_peer_provider", "get_prompter"]
