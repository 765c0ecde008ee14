"""Plain-text report builder — one numbered block per finding."""

from __future__ import annotations

from pai.schemas.report import Report

_SEVERITY_LABELS = {"error": "ERROR", "warning": "WARNING"}


def render_text(report: Report) -> str:
    """Render a Report into a line-oriented text document."""
    lines: list[str] = [
        "Accessibility Report",
        f"URL: {report.source_url or 'Unknown'}",
        f"Checked at: {report.generated_at or 'Unknown'}",
        "",
    ]

    if not report.findings:
        lines.append("No accessibility issues found!")
        return "\n".join(lines) + "\n"

    s = report.summary
    lines.append(f"Issues found: {s.total} ({s.error_count} errors, {s.warning_count} warnings)")
    lines.append("")
    for index, finding in enumerate(report.findings, start=1):
        label = _SEVERITY_LABELS.get(finding.severity, finding.severity.upper())
        lines.append(f"{index}. [{label}] {finding.category}")
        lines.append(f"   Message: {finding.message}")
        if finding.selector:
            lines.append(f"   Selector: {finding.selector}")
        lines.append("")
    return "\n".join(lines)
