"""JSON report output — direct structural serialization of a Report."""

from __future__ import annotations

from pai.schemas.report import Report


def render_json(report: Report, *, indent: int = 2) -> str:
    return report.model_dump_json(indent=indent)


def load_report(text: str) -> Report:
    """Parse a JSON report back into a Report (validates the summary)."""
    return Report.model_validate_json(text)
