"""Operator workspace documents and configuration."""

from .config import ConfigError, WorkspaceConfig, load_config, save_config
from .scaffold import (
    PERSONALITIES,
    PERSONALITY_CHOICES,
    IdentityProfile,
    OperatorProfile,
    WorkspaceFileSet,
    create_workspace,
    write_identity,
)
from .templates import find_placeholders, render

__all__ = [
    "ConfigError",
    "IdentityProfile",
    "OperatorProfile",
    "PERSONALITIES",
    "PERSONALITY_CHOICES",
    "WorkspaceConfig",
    "WorkspaceFileSet",
    "create_workspace",
    "find_placeholders",
    "load_config",
    "render",
    "save_config",
    "write_identity",
]
