"""Dashboard installation."""

from .core import InstallationResult, Installer, InstallOptions, InstallPlan, InstallStatus
from .envfile import EnvChange, write_peer_workspace
from .peer import OpenClawStatusProvider, PeerStatus, PeerStatusProvider, resolve_peer_workspace
from .record import InstallationRecord, has_record, load_record, save_record, set_tier
from .runner import CommandResult, CommandRunner

__all__ = [
    "CommandResult",
    "CommandRunner",
    "EnvChange",
    "InstallOptions",
    "InstallPlan",
    "InstallStatus",
    "InstallationRecord",
    "InstallationResult",
    "Installer",
    "OpenClawStatusProvider",
    "PeerStatus",
    "PeerStatusProvider",
    "has_record",
    "load_record",
    "resolve_peer_workspace",
    "save_record",
    "set_tier",
    "write_peer_workspace",
]
