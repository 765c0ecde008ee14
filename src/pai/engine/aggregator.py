"""Aggregator — merges check output into one Report."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable

from pai.schemas.report import Finding, Report, Summary


def summarize(findings: list[Finding]) -> Summary:
    errors = sum(1 for f in findings if f.severity == "error")
    return Summary(total=len(findings), error_count=errors, warning_count=len(findings) - errors)


def aggregate(
    findings: Iterable[Finding],
    *,
    source_url: str = "",
    generated_at: str | None = None,
) -> Report:
    """Build a Report from findings in run order. An empty iterable is a clean report."""
    ordered = list(findings)
    return Report(
        source_url=source_url,
        generated_at=generated_at or datetime.now(timezone.utc).isoformat(),
        findings=ordered,
        summary=summarize(ordered),
    )
