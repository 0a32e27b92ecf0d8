"""Workspace health diagnostics."""

from .checks import DiagnosticsRunner, Finding, FindingStatus, run_all, validate_channel
from .issues import Issue, Severity, Verdict, group_by_severity, verdict_for

__all__ = [
    "DiagnosticsRunner",
    "Finding",
    "FindingStatus",
    "Issue",
    "Severity",
    "Verdict",
    "group_by_severity",
    "run_all",
    "validate_channel",
    "verdict_for",
]
