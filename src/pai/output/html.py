"""Static HTML report generator — renders a Report to a self-contained HTML file."""

from __future__ import annotations

import json
from pathlib import Path

from jinja2 import Environment, FileSystemLoader

from pai.schemas.report import Report

_TEMPLATE_DIR = Path(__file__).parent / "templates"

_SEVERITY_ICONS = {"error": "❌", "warning": "⚠️"}
_SEVERITY_LABELS = {"error": "Error", "warning": "Warning"}


def render_html(report: Report) -> str:
    """Render a Report into a self-contained HTML page."""
    env = Environment(loader=FileSystemLoader(str(_TEMPLATE_DIR)), autoescape=True)
    template = env.get_template("report.html")

    findings = [
        {
            "severity": f.severity,
            "icon": _SEVERITY_ICONS.get(f.severity, ""),
            "label": _SEVERITY_LABELS.get(f.severity, f.severity),
            "category": f.category,
            "message": f.message,
            "selector": f.selector,
            "details_json": (
                json.dumps(f.details.model_dump(), indent=2, ensure_ascii=False)
                if f.details else None
            ),
        }
        for f in report.findings
    ]

    return template.render(
        source_url=report.source_url or "Unknown",
        generated_at=report.generated_at or "Unknown",
        summary=report.summary.model_dump(),
        findings=findings,
    )
