"""Placeholder rendering and whole-file writes for workspace documents."""

from __future__ import annotations

import re
from importlib.resources import files
from pathlib import Path
from typing import Mapping

from superclaw_cli.core.atomic import atomic_write_text

PLACEHOLDER_PATTERN = re.compile(r"\{([A-Z][A-Z0-9_]*)\}")


def render(template: str, substitutions: Mapping[str, str]) -> str:
    """Replace ``{TOKEN}`` placeholders with their substitutions.

    Only whole tokens are replaced, so ``{AI_NAME}`` never touches
    ``{AI_NAME_LONG}``. Placeholders without a substitution are left in
    place so diagnostics can still spot them.
    """

    def _substitute(match: re.Match[str]) -> str:
        key = match.group(1)
        if key in substitutions:
            return str(substitutions[key])
        return match.group(0)

    return PLACEHOLDER_PATTERN.sub(_substitute, template)


def find_placeholders(text: str) -> list[str]:
    """Return unresolved placeholder names in order of first appearance."""
    seen: list[str] = []
    for match in PLACEHOLDER_PATTERN.finditer(text):
        name = match.group(1)
        if name not in seen:
            seen.append(name)
    return seen


def load_template(name: str) -> str:
    """Read a bundled template from ``superclaw_cli/templates``."""
    resource = files("superclaw_cli").joinpath("templates", name)
    return resource.read_text(encoding="utf-8")


def write(path: Path, text: str) -> None:
    """Write the whole document at once; readers never see a partial file."""
    atomic_write_text(path, text)


def render_to(path: Path, template_name: str, substitutions: Mapping[str, str]) -> str:
    text = render(load_template(template_name), substitutions)
    write(path, text)
    return text


__all__ = [
    "PLACEHOLDER_PATTERN",
    "render",
    "find_placeholders",
    "load_template",
    "write",
    "render_to",
]
