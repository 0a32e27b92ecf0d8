"""Dashboard account commands: first-run admin setup and user management."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

import typer
from rich.panel import Panel
from rich.table import Table

from superclaw_cli.cli.helpers import console, exit_with_error, printer
from superclaw_cli.cli.prompts import TyperPrompter
from superclaw_cli.errors import SuperclawError, UserNotFound
from superclaw_cli.users import AdminProvisioner, BcryptHasher, Role, UserStore, open_user_store
from superclaw_cli.users.provisioning import ProvisionAction

app = typer.Typer(
    name="setup",
    help="Create the dashboard admin account and manage users.",
    invoke_without_command=True,
)
user_app = typer.Typer(help="Manage dashboard users", no_args_is_help=True)
app.add_typer(user_app, name="user")


def store_hasher() -> BcryptHasher:
    return BcryptHasher()


def _open(create: bool = False) -> UserStore:
    return open_user_store(create=create, hasher=store_hasher())


def _format_ms(value: Optional[int]) -> str:
    if value is None:
        return "never"
    return datetime.fromtimestamp(value / 1000).strftime("%Y-%m-%d %H:%M")


def _show_credentials(email: str, password: str, title: str) -> None:
    body = f"[bold]Email:[/bold]    {email}\n[bold]Password:[/bold] [yellow]{password}[/yellow]"
    console.print(Panel(body, title=title, border_style="green", expand=False))
    printer.warn("Save this password now. It will not be shown again.")


@app.callback()
def setup(
    ctx: typer.Context,
    email: Optional[str] = typer.Option(None, "--email", help="Admin email address (prompted when omitted)"),
) -> None:
    """Create the first admin account for the dashboard."""
    if ctx.invoked_subcommand is not None:
        return

    printer.heading("SuperClaw Dashboard Setup")
    try:
        store = _open(create=True)
        printer.success(f"User database ready at {store.db_path}")
        result = AdminProvisioner(store, TyperPrompter(console), printer, email=email).run()
    except SuperclawError as exc:
        exit_with_error(exc)

    if not result.succeeded:
        printer.info("Setup cancelled. No accounts were changed.")
        return

    title = "Password reset" if result.action is ProvisionAction.RESET else "Admin account created"
    _show_credentials(result.email, result.password, title)
    console.print()
    console.print("Next: [cyan]superclaw dashboard start[/cyan] and log in with these credentials.")


@user_app.command("add")
def add_user(
    email: str = typer.Argument(..., help="Email address of the new user"),
    role: str = typer.Option(Role.VIEW.value, "--role", "-r", help="view, edit or admin"),
) -> None:
    """Add a dashboard user with a generated password."""
    try:
        created = _open().create_user(email, role)
    except SuperclawError as exc:
        exit_with_error(exc)
    printer.success(f"Created {created.user.role} user {created.user.email}")
    _show_credentials(created.user.email, created.password, "New user")


@user_app.command("list")
def list_users() -> None:
    """List dashboard users."""
    try:
        users = _open().list_users()
    except SuperclawError as exc:
        exit_with_error(exc)

    if not users:
        printer.info("No users yet. Run 'superclaw setup' to create the admin account.")
        return

    table = Table(title="Dashboard Users", show_header=True)
    table.add_column("ID", style="dim", justify="right")
    table.add_column("Email", style="cyan")
    table.add_column("Role", style="magenta")
    table.add_column("Created", style="green")
    table.add_column("Last login", style="yellow")
    for user in users:
        table.add_row(str(user.id), user.email, user.role.value, _format_ms(user.created_at), _format_ms(user.last_login))
    console.print(table)


@user_app.command("delete")
def delete_user(
    email: str = typer.Argument(..., help="Email address of the user to delete"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt"),
) -> None:
    """Delete a dashboard user and sign out all of its sessions."""
    try:
        store = _open()
        if store.get_user(email) is None:
            raise UserNotFound(email)
        if not yes and not typer.confirm(f"Delete user {email}?", default=False):
            printer.info("Cancelled.")
            return
        store.delete_user(email)
    except SuperclawError as exc:
        exit_with_error(exc)
    printer.success(f"Deleted user {email}")


@user_app.command("reset")
def reset_password(email: str = typer.Argument(..., help="Email address of the user")) -> None:
    """Issue a new password and sign the user out everywhere."""
    try:
        password = _open().reset_password(email)
    except SuperclawError as exc:
        exit_with_error(exc)
    printer.success(f"Password reset for {email}; existing sessions were signed out")
    _show_credentials(email, password, "Password reset")


__all__ = ["app", "user_app"]
