"""Create and update the operator workspace document set."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path

from superclaw_cli.core.constants import (
    AGENTS_FILENAME,
    MEMORY_DIR,
    MEMORY_FILENAME,
    SOUL_FILENAME,
    USER_PROFILE_FILENAME,
)
from superclaw_cli.workspace import templates
from superclaw_cli.workspace.config import (
    AIConfig,
    ConfigError,
    UserConfig,
    WorkspaceConfig,
    config_path,
    load_config,
    save_config,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Personality:
    label: str
    communication_style: str
    traits: tuple[str, ...]


PERSONALITIES: dict[str, Personality] = {
    "professional": Personality(
        "Professional",
        "Formal, structured communication with business focus",
        ("Organized", "Reliable", "Goal-oriented", "Respectful"),
    ),
    "friendly": Personality(
        "Friendly",
        "Warm, conversational, using natural language and encouragement",
        ("Empathetic", "Supportive", "Optimistic", "Patient"),
    ),
    "direct": Personality(
        "Direct",
        "Concise, to-the-point responses with minimal fluff",
        ("Efficient", "Focused", "Practical", "Decisive"),
    ),
    "creative": Personality(
        "Creative",
        "Expressive, imaginative responses with creative solutions",
        ("Innovative", "Curious", "Flexible", "Inspiring"),
    ),
    "mentor": Personality(
        "Mentor",
        "Patient, teaching-focused with explanations and guidance",
        ("Patient", "Educational", "Encouraging", "Wise"),
    ),
    "technical": Personality(
        "Technical",
        "Precise, detail-oriented with thorough analysis",
        ("Analytical", "Precise", "Thorough", "Logical"),
    ),
}

PERSONALITY_CHOICES: dict[str, str] = {
    **{key: f"{p.label} - {p.communication_style}" for key, p in PERSONALITIES.items()},
    "custom": "Custom - describe your own",
}


@dataclass
class IdentityProfile:
    """Everything rendered into SOUL.md."""

    name: str = "Assistant"
    personality: str = "Friendly"
    communication_style: str = "Warm and helpful"
    traits: list[str] = field(default_factory=lambda: ["Helpful", "Patient", "Reliable"])
    verbosity: str = "medium"
    use_emoji: bool = False
    use_humor: bool = False
    special_instructions: str = "None yet - customize as needed"

    @classmethod
    def from_preset(cls, name: str, preset_key: str) -> "IdentityProfile":
        preset = PERSONALITIES[preset_key]
        return cls(
            name=name,
            personality=preset.label,
            communication_style=preset.communication_style,
            traits=list(preset.traits),
        )

    def substitutions(self) -> dict[str, str]:
        return {
            "AI_NAME": self.name,
            "PERSONALITY_TYPE": self.personality,
            "TRAITS": ", ".join(self.traits) if self.traits else "Adaptive",
            "COMMUNICATION_STYLE": self.communication_style,
            "VERBOSITY": self.verbosity,
            "EMOJI_USAGE": "Use emojis where they help" if self.use_emoji else "No emojis",
            "HUMOR": "Light humor when appropriate" if self.use_humor else "Keep it serious",
            "SPECIAL_INSTRUCTIONS": self.special_instructions,
        }


@dataclass
class OperatorProfile:
    """Everything rendered into USER.md."""

    name: str
    role: str = "Developer"
    timezone: str = "UTC"

    def substitutions(self) -> dict[str, str]:
        return {
            "USER_NAME": self.name,
            "PREFERRED_NAME": self.name,
            "USER_ROLE": self.role,
            "USER_LOCATION": "Not specified",
            "USER_TIMEZONE": self.timezone,
            "PREFERRED_COMMUNICATION_STYLE": "Natural and helpful",
            "FORMALITY_LEVEL": "Casual but respectful",
            "RESPONSE_PREFERENCE": "Clear and informative",
            "FEEDBACK_PREFERENCE": "Direct and constructive",
            "WORKING_HOURS": "Not specified",
            "PRODUCTIVITY_STYLE": "To be determined",
            "DECISION_STYLE": "To be determined",
            "USER_INTERESTS": "To be filled in over time",
            "USER_GOALS": "To be discussed and documented",
            "KEY_POINTS": "None yet - will be added as we work together",
            "BOUNDARIES": "Respect privacy and ask before taking external actions",
        }


@dataclass
class WorkspaceFileSet:
    """Paths written by ``create_workspace``."""

    root: Path
    soul: Path
    user: Path
    agents: Path
    memory: Path
    daily_log: Path
    config: Path

    def all_paths(self) -> list[Path]:
        return [self.soul, self.user, self.agents, self.memory, self.daily_log, self.config]


def write_identity(workspace_dir: Path, identity: IdentityProfile) -> Path:
    """Render SOUL.md and replace the existing file wholesale."""
    path = workspace_dir / SOUL_FILENAME
    templates.render_to(path, SOUL_FILENAME, identity.substitutions())
    logger.debug("Wrote identity document %s", path)
    return path


def write_daily_memory(
    workspace_dir: Path,
    identity: IdentityProfile,
    operator: OperatorProfile,
    today: date | None = None,
) -> Path:
    """Create ``memory/<today>.md`` unless a log for today already exists."""
    today = today or date.today()
    memory_dir = workspace_dir / MEMORY_DIR
    memory_dir.mkdir(parents=True, exist_ok=True)
    path = memory_dir / f"{today.isoformat()}.md"
    if path.exists():
        return path

    content = (
        f"# Memory Log - {today.isoformat()}\n\n"
        "## Setup\n\n"
        "- Created SuperClaw workspace\n"
        f"- AI name: {identity.name}\n"
        f"- Personality: {identity.personality}\n"
        f"- User: {operator.name} ({operator.role})\n\n"
        "## Notes\n\n"
        "*Daily events and context go here*\n"
    )
    templates.write(path, content)
    return path


def create_workspace(
    workspace_dir: Path,
    identity: IdentityProfile,
    operator: OperatorProfile,
    backend: str = "other",
    today: date | None = None,
) -> WorkspaceFileSet:
    """Render every workspace document and the configuration.

    Re-running over an existing workspace rewrites the rendered documents but
    keeps existing ``MEMORY.md`` and daily logs, and keeps channel and module
    records from a previous configuration.
    """
    workspace_dir = workspace_dir.resolve()
    workspace_dir.mkdir(parents=True, exist_ok=True)
    (workspace_dir / MEMORY_DIR).mkdir(exist_ok=True)

    soul = write_identity(workspace_dir, identity)
    user = workspace_dir / USER_PROFILE_FILENAME
    templates.render_to(user, USER_PROFILE_FILENAME, operator.substitutions())

    agents = workspace_dir / AGENTS_FILENAME
    templates.write(agents, templates.load_template(AGENTS_FILENAME))

    memory = workspace_dir / MEMORY_FILENAME
    if not memory.exists():
        templates.write(memory, templates.load_template(MEMORY_FILENAME))

    daily_log = write_daily_memory(workspace_dir, identity, operator, today)

    config = WorkspaceConfig(
        backend="openclaw" if backend == "openclaw" else "other",
        workspace=str(workspace_dir),
        ai=AIConfig(name=identity.name, personality=identity.personality),
        user=UserConfig(name=operator.name, role=operator.role, timezone=operator.timezone),
    )
    previous = _load_previous(workspace_dir)
    if previous is not None:
        config.channels = previous.channels
        config.modules = previous.modules
        config.dashboard = previous.dashboard
        config.created = previous.created
    config_file = save_config(workspace_dir, config)

    return WorkspaceFileSet(
        root=workspace_dir,
        soul=soul,
        user=user,
        agents=agents,
        memory=memory,
        daily_log=daily_log,
        config=config_file,
    )


def _load_previous(workspace_dir: Path) -> WorkspaceConfig | None:
    if not config_path(workspace_dir).exists():
        return None
    try:
        return load_config(workspace_dir)
    except ConfigError as exc:
        logger.warning("Ignoring unreadable previous configuration: %s", exc)
        return None


__all__ = [
    "PERSONALITIES",
    "PERSONALITY_CHOICES",
    "Personality",
    "IdentityProfile",
    "OperatorProfile",
    "WorkspaceFileSet",
    "create_workspace",
    "write_identity",
    "write_daily_memory",
]
