"""Diagnostic issue types and the overall verdict."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import StrEnum


class Severity(StrEnum):
    CRITICAL = "critical"
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


SEVERITY_ORDER: tuple[Severity, ...] = (
    Severity.CRITICAL,
    Severity.ERROR,
    Severity.WARNING,
    Severity.INFO,
)


class Verdict(StrEnum):
    ACTION_REQUIRED = "action_required"
    RECOMMENDED = "recommended"
    READY = "ready"
    HEALTHY = "healthy"


VERDICT_MESSAGES: dict[Verdict, str] = {
    Verdict.ACTION_REQUIRED: "Fix critical issues and errors before using SuperClaw.",
    Verdict.RECOMMENDED: "Fix warnings to improve your SuperClaw experience.",
    Verdict.READY: "Your workspace is ready. Address info items as needed.",
    Verdict.HEALTHY: "Your SuperClaw workspace is healthy and ready to use.",
}


@dataclass(frozen=True)
class Issue:
    severity: Severity
    category: str
    description: str
    remediation: str

    def to_dict(self) -> dict[str, str]:
        data = asdict(self)
        data["severity"] = self.severity.value
        return data


def group_by_severity(issues: list[Issue]) -> dict[Severity, list[Issue]]:
    grouped: dict[Severity, list[Issue]] = {severity: [] for severity in SEVERITY_ORDER}
    for issue in issues:
        grouped[issue.severity].append(issue)
    return grouped


def verdict_for(issues: list[Issue]) -> Verdict:
    severities = {issue.severity for issue in issues}
    if not severities:
        return Verdict.HEALTHY
    if Severity.CRITICAL in severities or Severity.ERROR in severities:
        return Verdict.ACTION_REQUIRED
    if Severity.WARNING in severities:
        return Verdict.RECOMMENDED
    return Verdict.READY


__all__ = [
    "Issue",
    "SEVERITY_ORDER",
    "Severity",
    "VERDICT_MESSAGES",
    "Verdict",
    "group_by_severity",
    "verdict_for",
]
