"""Command registration for the ``superclaw`` app."""

from __future__ import annotations

import typer

from . import dashboard as dashboard_module
from . import license as license_module
from . import memory as memory_module
from . import setup as setup_module
from . import doctor as doctor_module
from . import fix_env as fix_env_module
from . import init as init_module
from . import soul as soul_module
from . import status as status_module
from . import update as update_module


def register_commands(app: typer.Typer) -> None:
    """Attach all top-level commands and sub-apps to the root Typer app."""
    app.command()(init_module.init)
    app.add_typer(setup_module.app, name="setup")
    app.add_typer(dashboard_module.app, name="dashboard")
    app.command()(doctor_module.doctor)
    app.command()(status_module.status)
    app.command()(soul_module.soul)
    app.add_typer(memory_module.app, name="memory")
    app.add_typer(license_module.app, name="license")
    app.command()(update_module.update)
    app.command("fix-env")(fix_env_module.fix_env)


__all__ = ["register_commands"]
