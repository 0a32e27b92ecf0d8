"""Pydantic schema for ``superclaw-config.json``."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, ValidationError

from superclaw_cli.core.atomic import atomic_write_json
from superclaw_cli.core.constants import CONFIG_FILENAME, CONFIG_VERSION
from superclaw_cli.errors import SuperclawError

REQUIRED_FIELDS = ("version", "workspace", "ai", "user")


class AIConfig(BaseModel):
    name: str = "Assistant"
    personality: str = "Balanced and helpful"


class UserConfig(BaseModel):
    name: str = ""
    role: str = "Developer"
    timezone: str = "UTC"


class DashboardConfig(BaseModel):
    install_dir: str | None = None
    port: int | None = None


class WorkspaceConfig(BaseModel):
    """Top-level workspace configuration."""

    version: str = CONFIG_VERSION
    created: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    backend: Literal["openclaw", "other"] = "other"
    workspace: str
    ai: AIConfig = Field(default_factory=AIConfig)
    user: UserConfig = Field(default_factory=UserConfig)
    channels: dict[str, dict[str, Any]] = Field(default_factory=dict)
    modules: dict[str, dict[str, Any]] = Field(default_factory=dict)
    dashboard: DashboardConfig | None = None


class ConfigError(SuperclawError):
    default_remediation = "Fix the JSON syntax or re-run 'superclaw init'."


def config_path(workspace_dir: Path) -> Path:
    return workspace_dir / CONFIG_FILENAME


def read_raw_config(workspace_dir: Path) -> dict[str, Any]:
    """Return the parsed JSON document without schema validation.

    Raises:
        FileNotFoundError: the configuration document does not exist.
        ConfigError: the document is not UTF-8 encoded JSON holding an object.
    """
    path = config_path(workspace_dir)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except UnicodeDecodeError as exc:
        raise ConfigError(f"{CONFIG_FILENAME} is not valid UTF-8: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigError(f"{CONFIG_FILENAME} is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a JSON object.")
    return data


def load_config(workspace_dir: Path) -> WorkspaceConfig:
    data = read_raw_config(workspace_dir)
    try:
        return WorkspaceConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"{CONFIG_FILENAME} does not match the expected schema: {exc}") from exc


def save_config(workspace_dir: Path, config: WorkspaceConfig) -> Path:
    path = config_path(workspace_dir)
    atomic_write_json(path, config.model_dump(mode="json", exclude_none=True))
    return path


__all__ = [
    "REQUIRED_FIELDS",
    "AIConfig",
    "UserConfig",
    "DashboardConfig",
    "WorkspaceConfig",
    "ConfigError",
    "config_path",
    "read_raw_config",
    "load_config",
    "save_config",
]
