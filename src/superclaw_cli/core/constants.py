"""Shared file names and defaults for SuperClaw workspaces and installs."""

from __future__ import annotations

CONFIG_FILENAME = "superclaw-config.json"
INSTALL_RECORD_FILENAME = ".superclaw-install.json"
PID_FILENAME = ".dashboard.pid"
DASHBOARD_LOG_FILENAME = "dashboard.log"
USER_DB_FILENAME = "superclaw.db"

SOUL_FILENAME = "SOUL.md"
USER_PROFILE_FILENAME = "USER.md"
AGENTS_FILENAME = "AGENTS.md"
MEMORY_FILENAME = "MEMORY.md"
MEMORY_DIR = "memory"
MODULES_DIR = "modules"

DASHBOARD_PACKAGE_NAME = "@skunkceo/superclaw-dashboard"
DEFAULT_DASHBOARD_REPO = "https://github.com/skunkceo/superclaw-dashboard.git"
DEFAULT_DASHBOARD_PORT = 3077
DEFAULT_WORKSPACE_NAME = "superclaw-workspace"

MIN_NODE_MAJOR = 18
CONFIG_VERSION = "1.0.0"

__all__ = [
    "CONFIG_FILENAME",
    "INSTALL_RECORD_FILENAME",
    "PID_FILENAME",
    "DASHBOARD_LOG_FILENAME",
    "USER_DB_FILENAME",
    "SOUL_FILENAME",
    "USER_PROFILE_FILENAME",
    "AGENTS_FILENAME",
    "MEMORY_FILENAME",
    "MEMORY_DIR",
    "MODULES_DIR",
    "DASHBOARD_PACKAGE_NAME",
    "DEFAULT_DASHBOARD_REPO",
    "DEFAULT_DASHBOARD_PORT",
    "DEFAULT_WORKSPACE_NAME",
    "MIN_NODE_MAJOR",
    "CONFIG_VERSION",
]
