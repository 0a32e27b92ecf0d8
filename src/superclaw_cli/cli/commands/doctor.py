"""Doctor command: workspace diagnostics report."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer

from superclaw_cli.cli.helpers import console, exit_with_error, require_workspace
from superclaw_cli.doctor import (
    DiagnosticsRunner,
    FindingStatus,
    Severity,
    Verdict,
    group_by_severity,
    verdict_for,
)
from superclaw_cli.doctor.issues import SEVERITY_ORDER, VERDICT_MESSAGES
from superclaw_cli.errors import SuperclawError

_FINDING_SYMBOLS = {
    FindingStatus.OK: "[green]✓[/green]",
    FindingStatus.WARN: "[yellow]![/yellow]",
    FindingStatus.FAIL: "[red]✗[/red]",
    FindingStatus.INFO: "[blue]i[/blue]",
    FindingStatus.SKIP: "[dim]○[/dim]",
}

_SEVERITY_STYLES = {
    Severity.CRITICAL: ("red", "Critical"),
    Severity.ERROR: ("red", "Error"),
    Severity.WARNING: ("yellow", "Warning"),
    Severity.INFO: ("blue", "Info"),
}

_VERDICT_STYLES = {
    Verdict.ACTION_REQUIRED: ("red", "Action Required"),
    Verdict.RECOMMENDED: ("yellow", "Recommended Actions"),
    Verdict.READY: ("green", "Ready to Go"),
    Verdict.HEALTHY: ("green", "No issues found"),
}


def get_diagnostics() -> DiagnosticsRunner:
    return DiagnosticsRunner()


def doctor(
    dir: Optional[Path] = typer.Option(None, "--dir", help="Workspace directory to check"),
    json_output: bool = typer.Option(False, "--json", help="Output machine-readable JSON"),
) -> None:
    """Run workspace diagnostics and report issues by severity."""
    try:
        workspace = require_workspace(dir)
    except SuperclawError as exc:
        exit_with_error(exc)

    diagnostics = get_diagnostics()
    issues = diagnostics.run_all(workspace)
    verdict = verdict_for(issues)

    if json_output:
        payload = {
            "workspace": str(workspace),
            "verdict": verdict.value,
            "issues": [issue.to_dict() for issue in issues],
        }
        typer.echo(json.dumps(payload, indent=2))
        return

    console.print("[bold cyan]SuperClaw Doctor[/bold cyan]")
    console.print(f"[dim]Workspace: {workspace}[/dim]")

    section = None
    index = 0
    for finding in diagnostics.findings:
        if finding.section != section:
            section = finding.section
            index += 1
            console.print(f"\n[cyan]{index}. {section}[/cyan]")
        console.print(f"  {_FINDING_SYMBOLS[finding.status]} {finding.message}")

    console.print("\n[bold]Diagnostic Summary[/bold]\n")
    grouped = group_by_severity(issues)
    for severity in SEVERITY_ORDER:
        group = grouped[severity]
        if not group:
            continue
        color, label = _SEVERITY_STYLES[severity]
        plural = "s" if len(group) > 1 and severity is not Severity.INFO else ""
        console.print(f"[{color}]{len(group)} {label}{plural}[/{color}]")
        fix_label = "Note" if severity is Severity.INFO else "Fix"
        for number, issue in enumerate(group, start=1):
            console.print(f"{number}. {issue.category}: {issue.description}")
            console.print(f"   [cyan]{fix_label}: {issue.remediation}[/cyan]")
        console.print()

    color, label = _VERDICT_STYLES[verdict]
    console.print(f"[bold {color}]{label}[/bold {color}]")
    console.print(VERDICT_MESSAGES[verdict])


__all__ = ["doctor", "get_diagnostics"]
