"""Dashboard process management."""

from .launcher import (
    DashboardState,
    LaunchMode,
    LaunchOutcome,
    LaunchResult,
    ProcessLauncher,
    StopOutcome,
    StopResult,
    dashboard_url,
)
from .locate import is_dashboard_dir, locate_dashboard

__all__ = [
    "DashboardState",
    "LaunchMode",
    "LaunchOutcome",
    "LaunchResult",
    "ProcessLauncher",
    "StopOutcome",
    "StopResult",
    "dashboard_url",
    "is_dashboard_dir",
    "locate_dashboard",
]
