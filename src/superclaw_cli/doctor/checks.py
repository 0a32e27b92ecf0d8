"""Workspace diagnostics.

Each check records human-readable findings for display and appends an
``Issue`` for anything the operator should act on. Checks never raise: a
failing probe becomes an issue. Checks that read the configuration document
are skipped when it is missing or unreadable, because that problem is
already reported once as a critical issue.
"""

from __future__ import annotations

import json
import logging
import os
import platform
from dataclasses import dataclass, field
from datetime import date
from enum import StrEnum
from pathlib import Path
from typing import Any, Callable, ClassVar, Optional

from superclaw_cli.core.constants import (
    AGENTS_FILENAME,
    CONFIG_FILENAME,
    MEMORY_DIR,
    MEMORY_FILENAME,
    MIN_NODE_MAJOR,
    MODULES_DIR,
    SOUL_FILENAME,
    USER_PROFILE_FILENAME,
)
from superclaw_cli.doctor.issues import Issue, Severity
from superclaw_cli.installer.prerequisites import detect_node_version
from superclaw_cli.installer.runner import CommandRunner
from superclaw_cli.workspace.config import REQUIRED_FIELDS, ConfigError, read_raw_config
from superclaw_cli.workspace.templates import find_placeholders

logger = logging.getLogger(__name__)

REQUIRED_DOCUMENTS = (SOUL_FILENAME, USER_PROFILE_FILENAME, AGENTS_FILENAME, MEMORY_FILENAME)
SOUL_IDENTITY_PLACEHOLDERS = ("AI_NAME", "PERSONALITY_TYPE")
MODULE_PLACEHOLDER_PREFIX = "YOUR_"


class FindingStatus(StrEnum):
    OK = "ok"
    WARN = "warn"
    FAIL = "fail"
    INFO = "info"
    SKIP = "skip"


@dataclass
class Finding:
    section: str
    status: FindingStatus
    message: str


def validate_channel(name: str, settings: dict[str, Any]) -> Optional[str]:
    """Return an error message for an invalid channel, or None."""
    token = settings.get("botToken")
    if name == "slack":
        if not token:
            return "Missing bot token"
        if not str(token).startswith("xoxb-"):
            return "Invalid bot token format"
    elif name == "discord":
        if not token:
            return "Missing bot token"
        if not settings.get("applicationId"):
            return "Missing application ID"
    elif name == "telegram":
        if not token:
            return "Missing bot token"
        if ":" not in str(token):
            return "Invalid bot token format"
    elif name == "whatsapp":
        if not settings.get("phoneNumber"):
            return "Missing phone number"
        if not settings.get("accessToken") and not settings.get("apiKey"):
            return "Missing access token or API key"
    return None


def _probe_write(directory: Path, name: str) -> Optional[str]:
    """Create and delete a scratch file; return the error text on failure."""
    probe = directory / name
    try:
        probe.write_text("test", encoding="utf-8")
    except OSError as exc:
        return str(exc)
    finally:
        try:
            probe.unlink(missing_ok=True)
        except OSError as exc:
            logger.debug("Could not remove probe file %s: %s", probe, exc)
    return None


@dataclass
class DiagnosticsRunner:
    """Run every workspace check and collect issues."""

    runner: CommandRunner = field(default_factory=CommandRunner)
    today: Optional[date] = None
    findings: list[Finding] = field(default_factory=list)
    issues: list[Issue] = field(default_factory=list)

    _section: str = field(default="", init=False, repr=False)
    _config: Optional[dict[str, Any]] = field(default=None, init=False, repr=False)

    SECTIONS: ClassVar[tuple[tuple[str, str], ...]] = (
        ("system", "System Requirements"),
        ("structure", "Workspace Structure"),
        ("configuration", "Configuration Files"),
        ("memory", "Memory System"),
        ("channels", "Channel Connections"),
        ("modules", "Installed Modules"),
        ("permissions", "File Permissions"),
        ("network", "Network Connectivity"),
    )

    # -- recording -------------------------------------------------------

    def _note(self, status: FindingStatus, message: str) -> None:
        self.findings.append(Finding(self._section, status, message))

    def _issue(self, severity: Severity, category: str, description: str, remediation: str) -> None:
        self.issues.append(Issue(severity, category, description, remediation))

    # -- entry point -----------------------------------------------------

    def run_all(self, workspace_dir: Path) -> list[Issue]:
        self.findings = []
        self.issues = []
        self._config = None
        checks: dict[str, Callable[[Path], None]] = {
            "system": lambda _ws: self.check_system(),
            "structure": self.check_structure,
            "configuration": self.check_configuration,
            "memory": self.check_memory,
            "channels": self.check_channels,
            "modules": self.check_modules,
            "permissions": self.check_permissions,
            "network": lambda _ws: self.check_network(),
        }
        for key, title in self.SECTIONS:
            self._section = title
            checks[key](workspace_dir)
        return list(self.issues)

    # -- checks ----------------------------------------------------------

    def check_system(self) -> None:
        version = detect_node_version(self.runner)
        if version is None:
            self._note(FindingStatus.FAIL, "Node.js not found")
            self._issue(
                Severity.ERROR,
                "System",
                "Node.js is not installed",
                f"Install Node.js {MIN_NODE_MAJOR}+ from https://nodejs.org/",
            )
        elif version.major < MIN_NODE_MAJOR:
            self._note(FindingStatus.FAIL, f"Node.js {version} (requires {MIN_NODE_MAJOR}+)")
            self._issue(
                Severity.ERROR,
                "System",
                "Node.js version too old",
                "Update Node.js from https://nodejs.org/",
            )
        else:
            self._note(FindingStatus.OK, f"Node.js {version} (minimum {MIN_NODE_MAJOR})")
        self._note(
            FindingStatus.OK,
            f"Platform: {platform.system().lower()} ({platform.machine()}), Python {platform.python_version()}",
        )

    def check_structure(self, workspace_dir: Path) -> None:
        for name in REQUIRED_DOCUMENTS:
            if (workspace_dir / name).is_file():
                self._note(FindingStatus.OK, name)
            else:
                self._note(FindingStatus.FAIL, f"{name} (missing)")
                self._issue(
                    Severity.CRITICAL,
                    "Workspace",
                    f"Missing required file: {name}",
                    f"Re-run 'superclaw init' or create {name} manually",
                )
        memory_dir = workspace_dir / MEMORY_DIR
        if memory_dir.is_dir():
            self._note(FindingStatus.OK, f"{MEMORY_DIR}/ directory")
        else:
            self._note(FindingStatus.WARN, f"{MEMORY_DIR}/ directory (missing)")
            self._issue(
                Severity.WARNING,
                "Workspace",
                f"Missing directory: {MEMORY_DIR}",
                f"Create directory: mkdir -p {memory_dir}",
            )

    def check_configuration(self, workspace_dir: Path) -> None:
        try:
            config = read_raw_config(workspace_dir)
        except FileNotFoundError:
            self._note(FindingStatus.FAIL, "Configuration file missing")
            self._issue(
                Severity.CRITICAL,
                "Configuration",
                f"{CONFIG_FILENAME} missing",
                "Re-run 'superclaw init' to recreate configuration",
            )
            return
        except (ConfigError, OSError) as exc:
            self._note(FindingStatus.FAIL, f"Configuration file corrupted: {exc}")
            self._issue(
                Severity.CRITICAL,
                "Configuration",
                "Configuration file corrupted",
                "Fix JSON syntax or re-run 'superclaw init'",
            )
            return

        self._config = config
        self._note(FindingStatus.OK, "Configuration file valid JSON")
        for name in REQUIRED_FIELDS:
            if config.get(name):
                self._note(FindingStatus.OK, f"Configuration has {name}")
            else:
                self._note(FindingStatus.WARN, f"Configuration missing {name}")
                self._issue(
                    Severity.WARNING,
                    "Configuration",
                    f"Missing configuration field: {name}",
                    "Update configuration file or re-run setup",
                )

        ai = config.get("ai")
        if isinstance(ai, dict):
            if ai.get("name"):
                self._note(FindingStatus.OK, f"AI name configured: {ai['name']}")
            else:
                self._note(FindingStatus.WARN, "AI name not set")
                self._issue(
                    Severity.WARNING,
                    "Configuration",
                    "AI name not configured",
                    "Run 'superclaw soul' to set AI personality",
                )

        soul = workspace_dir / SOUL_FILENAME
        if soul.is_file():
            try:
                remaining = find_placeholders(soul.read_text(encoding="utf-8"))
            except (OSError, UnicodeDecodeError) as exc:
                self._note(FindingStatus.WARN, f"{SOUL_FILENAME} unreadable: {exc}")
                self._issue(
                    Severity.WARNING,
                    "Configuration",
                    f"{SOUL_FILENAME} could not be read",
                    "Run 'superclaw soul' to rewrite the AI personality",
                )
                return
            if any(name in remaining for name in SOUL_IDENTITY_PLACEHOLDERS):
                self._note(FindingStatus.WARN, f"{SOUL_FILENAME} has placeholder values")
                self._issue(
                    Severity.WARNING,
                    "Configuration",
                    f"{SOUL_FILENAME} not fully configured",
                    "Run 'superclaw soul' to complete AI personality setup",
                )
            else:
                self._note(FindingStatus.OK, f"{SOUL_FILENAME} configured")

    def check_memory(self, workspace_dir: Path) -> None:
        memory_dir = workspace_dir / MEMORY_DIR
        if not memory_dir.is_dir():
            self._note(FindingStatus.SKIP, "Memory directory missing (see Workspace Structure)")
            return

        daily = sorted(p.name for p in memory_dir.glob("*.md"))
        if not daily:
            self._note(FindingStatus.WARN, "No daily memory files found")
            self._issue(
                Severity.INFO,
                "Memory",
                "No daily memory files",
                "Memory files will be created automatically during AI interactions",
            )
        else:
            self._note(FindingStatus.OK, f"{len(daily)} daily memory file(s)")
            today = (self.today or date.today()).isoformat()
            if f"{today}.md" in daily:
                self._note(FindingStatus.OK, "Today's memory file exists")
            else:
                self._note(FindingStatus.INFO, "No memory file for today yet")

        error = _probe_write(memory_dir, "test-write.tmp")
        if error is None:
            self._note(FindingStatus.OK, "Memory directory writable")
        else:
            self._note(FindingStatus.FAIL, "Memory directory not writable")
            self._issue(
                Severity.CRITICAL,
                "Memory",
                "Cannot write to memory directory",
                f"Check file permissions: chmod 755 {memory_dir}",
            )

    def check_channels(self, workspace_dir: Path) -> None:
        if self._config is None:
            self._note(FindingStatus.SKIP, "No readable configuration to check channels")
            return
        channels = self._config.get("channels") or {}
        if not isinstance(channels, dict) or not channels:
            self._note(FindingStatus.INFO, "No channels configured yet")
            self._issue(
                Severity.INFO,
                "Channels",
                "No communication channels configured",
                "Add channel settings under 'channels' in the configuration file",
            )
            return

        for name, settings in channels.items():
            if not isinstance(settings, dict) or not settings.get("enabled"):
                self._note(FindingStatus.SKIP, f"{name} disabled")
                continue
            problem = validate_channel(name, settings)
            if problem is None:
                self._note(FindingStatus.OK, f"{name} configured")
            else:
                self._note(FindingStatus.FAIL, f"{name} configuration invalid")
                self._issue(
                    Severity.ERROR,
                    "Channels",
                    f"{name}: {problem}",
                    f"Update the '{name}' entry under 'channels' in {CONFIG_FILENAME}",
                )

    def check_modules(self, workspace_dir: Path) -> None:
        if self._config is None:
            self._note(FindingStatus.SKIP, "No readable configuration to check modules")
            return
        modules_dir = workspace_dir / MODULES_DIR
        if not modules_dir.is_dir():
            self._note(FindingStatus.INFO, "No modules directory (no modules installed)")
            return
        module_dirs = sorted(p for p in modules_dir.iterdir() if p.is_dir())
        if not module_dirs:
            self._note(FindingStatus.INFO, "No modules installed")
            return

        for module_dir in module_dirs:
            self._check_module(module_dir)

    def _check_module(self, module_dir: Path) -> None:
        name = module_dir.name
        manifest_path = module_dir / "module.json"
        if not manifest_path.is_file():
            self._note(FindingStatus.FAIL, f"{name}: module.json missing")
            self._issue(
                Severity.ERROR,
                "Modules",
                f"{name}: Missing module.json",
                "Reinstall the module or create module.json manually",
            )
            return
        try:
            manifest = json.loads(manifest_path.read_text(encoding="utf-8"))
            if not isinstance(manifest, dict):
                raise ValueError("module.json must contain an object")
        except (OSError, ValueError) as exc:
            logger.debug("Corrupted manifest %s: %s", manifest_path, exc)
            self._note(FindingStatus.FAIL, f"{name}: Corrupted module.json")
            self._issue(Severity.ERROR, "Modules", f"{name}: Corrupted configuration", "Reinstall the module")
            return

        self._note(FindingStatus.OK, f"{name}: Valid module.json")
        if not manifest.get("enabled"):
            self._note(FindingStatus.SKIP, f"{name}: Disabled")
            return

        settings_path = module_dir / "config.json"
        if not settings_path.is_file():
            self._note(FindingStatus.FAIL, f"{name}: config.json missing")
            self._issue(
                Severity.ERROR,
                "Modules",
                f"{name}: Missing config.json",
                "Create config.json with required settings",
            )
            return
        try:
            settings = json.loads(settings_path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            self._note(FindingStatus.FAIL, f"{name}: Corrupted config.json")
            self._issue(Severity.ERROR, "Modules", f"{name}: Corrupted config.json", "Fix the JSON syntax in config.json")
            return

        values = settings.values() if isinstance(settings, dict) else []
        if any(isinstance(v, str) and v.startswith(MODULE_PLACEHOLDER_PREFIX) for v in values):
            self._note(FindingStatus.WARN, f"{name}: Has placeholder values")
            self._issue(
                Severity.WARNING,
                "Modules",
                f"{name}: Configuration has placeholder values",
                "Edit config.json and replace YOUR_* placeholders with actual values",
            )
        else:
            self._note(FindingStatus.OK, f"{name}: Configured and enabled")

    def check_permissions(self, workspace_dir: Path) -> None:
        if not os.access(workspace_dir, os.R_OK):
            error: Optional[str] = "workspace is not readable"
        else:
            error = _probe_write(workspace_dir, ".superclaw-test")
        if error is None:
            self._note(FindingStatus.OK, "Can create and delete files")
            return
        self._note(FindingStatus.FAIL, f"File permission error: {error}")
        self._issue(
            Severity.CRITICAL,
            "Permissions",
            "Insufficient file permissions",
            f"Check and fix file permissions: chmod -R 755 {workspace_dir}",
        )

    def check_network(self) -> None:
        if self.runner.which("curl"):
            self._note(FindingStatus.OK, "curl available for network testing")
            return
        self._note(FindingStatus.WARN, "curl not found (optional)")
        self._issue(
            Severity.INFO,
            "Network",
            "curl not available for network testing",
            "Install curl for better network diagnostics",
        )


def run_all(workspace_dir: Path, runner: CommandRunner | None = None) -> list[Issue]:
    return DiagnosticsRunner(runner=runner or CommandRunner()).run_all(workspace_dir)


__all__ = [
    "DiagnosticsRunner",
    "Finding",
    "FindingStatus",
    "REQUIRED_DOCUMENTS",
    "run_all",
    "validate_channel",
]
