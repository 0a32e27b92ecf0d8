"""Prompt abstraction for interactive flows.

Business logic (installer confirmations, admin provisioning) talks to a
``Prompter`` rather than to the terminal, so the same flows run under a
scripted prompter in tests.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Dict, Optional, Protocol

import typer
from rich.console import Console

from .ui import select_with_arrows

logger = logging.getLogger(__name__)

_CI_ENV_VARS = [
    "CI",
    "GITHUB_ACTIONS",
    "JENKINS_HOME",
    "GITLAB_CI",
    "CIRCLECI",
    "TRAVIS",
    "BUILDKITE",
]


def is_interactive() -> bool:
    """Detect if running in an interactive terminal.

    Checks:
    1. sys.stdin.isatty() -- True if connected to a terminal
    2. CI environment variables (CI, GITHUB_ACTIONS, JENKINS_HOME, etc.)
    """
    if not sys.stdin.isatty():
        return False

    for var in _CI_ENV_VARS:
        if os.getenv(var):
            return False

    return True


class Prompter(Protocol):
    """Question/answer capability used by interactive flows."""

    def ask(self, question: str, default: Optional[str] = None) -> str: ...

    def confirm(self, question: str, default: bool = False) -> bool: ...

    def choose(self, question: str, options: Dict[str, str], default: Optional[str] = None) -> str: ...


class TyperPrompter:
    """Prompter backed by ``typer.prompt`` and the arrow-key selector."""

    def __init__(self, console: Console | None = None):
        self.console = console or Console()

    def ask(self, question: str, default: Optional[str] = None) -> str:
        if default is None:
            return typer.prompt(question, default="", show_default=False).strip()
        return typer.prompt(question, default=default).strip()

    def confirm(self, question: str, default: bool = False) -> bool:
        return typer.confirm(question, default=default)

    def choose(self, question: str, options: Dict[str, str], default: Optional[str] = None) -> str:
        if is_interactive():
            return select_with_arrows(options, question, default_key=default, console=self.console)

        logger.debug("Non-interactive terminal, falling back to numbered choice prompt")
        keys = list(options)
        for index, key in enumerate(keys, start=1):
            self.console.print(f"  {index}. {options[key]}")
        default_index = str(keys.index(default) + 1) if default in keys else "1"
        while True:
            answer = typer.prompt(f"{question} [1-{len(keys)}]", default=default_index).strip()
            if answer.isdigit() and 1 <= int(answer) <= len(keys):
                return keys[int(answer) - 1]
            if answer in options:
                return answer
            self.console.print(f"[red]Please choose a number between 1 and {len(keys)}[/red]")


__all__ = ["Prompter", "TyperPrompter", "is_interactive"]
