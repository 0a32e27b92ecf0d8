"""Interview flows shared by ``init`` and ``soul``."""

from __future__ import annotations

from superclaw_cli.cli.prompts import Prompter
from superclaw_cli.workspace.scaffold import (
    PERSONALITIES,
    PERSONALITY_CHOICES,
    IdentityProfile,
    OperatorProfile,
)

VERBOSITY_CHOICES = {
    "short": "Short - just the essentials",
    "medium": "Medium - balanced detail",
    "detailed": "Detailed - thorough explanations",
}

BACKEND_CHOICES = {
    "openclaw": "OpenClaw (self-hosted AI gateway)",
    "other": "Other (manual configuration)",
}


def ask_identity(prompter: Prompter, current_name: str = "Assistant", detailed: bool = False) -> IdentityProfile:
    """Ask for the AI's name and personality.

    With ``detailed`` the response style questions are asked as well;
    otherwise they keep their defaults.
    """
    name = prompter.ask("What should your AI be called?", default=current_name) or current_name
    choice = prompter.choose("Personality style", PERSONALITY_CHOICES, default="friendly")

    if choice in PERSONALITIES:
        identity = IdentityProfile.from_preset(name, choice)
    else:
        identity = IdentityProfile(
            name=name,
            personality=prompter.ask("Describe your AI's personality", default="Custom"),
            communication_style=prompter.ask("Describe communication style", default="Adaptive style"),
        )
        traits = prompter.ask("Key traits (comma-separated)", default="")
        identity.traits = [t.strip() for t in traits.split(",") if t.strip()] or ["Adaptive"]

    if detailed:
        identity.verbosity = prompter.choose("Response length preference", VERBOSITY_CHOICES, default="medium")
        identity.use_emoji = prompter.confirm("Use emojis in responses?", default=False)
        identity.use_humor = prompter.confirm("Include humor when appropriate?", default=False)
        special = prompter.ask("Any special behaviors or rules? (optional)", default="")
        if special:
            identity.special_instructions = special
    return identity


def ask_operator(prompter: Prompter) -> OperatorProfile:
    return OperatorProfile(
        name=prompter.ask("What's your name?", default="User") or "User",
        role=prompter.ask("What's your role/profession?", default="Developer"),
        timezone=prompter.ask("Your timezone?", default="UTC"),
    )


__all__ = ["BACKEND_CHOICES", "VERBOSITY_CHOICES", "ask_identity", "ask_operator"]
