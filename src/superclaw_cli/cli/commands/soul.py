"""Soul command: reconfigure the AI identity document."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from superclaw_cli.cli.commands import init as init_cmd
from superclaw_cli.cli.helpers import exit_with_error, printer, require_workspace
from superclaw_cli.cli.questions import ask_identity
from superclaw_cli.errors import SuperclawError
from superclaw_cli.workspace import load_config, save_config, write_identity


def soul(dir: Optional[Path] = typer.Option(None, "--dir", help="Workspace directory")) -> None:
    """Re-run the personality questions and rewrite SOUL.md."""
    try:
        workspace = require_workspace(dir)
        config = load_config(workspace)
    except FileNotFoundError:
        printer.error("No configuration found in this workspace.")
        printer.print("  [cyan]→ Run 'superclaw init' first.[/cyan]")
        raise typer.Exit(1)
    except SuperclawError as exc:
        exit_with_error(exc)

    printer.heading("AI Personality Configuration")
    printer.info(f"Current: {config.ai.name} ({config.ai.personality})")

    identity = ask_identity(init_cmd.get_prompter(), current_name=config.ai.name, detailed=True)
    soul_path = write_identity(workspace, identity)

    config.ai.name = identity.name
    config.ai.personality = identity.personality
    save_config(workspace, config)

    printer.success(f"{soul_path.name} updated for {identity.name} ({identity.personality})")


__all__ = ["soul"]
