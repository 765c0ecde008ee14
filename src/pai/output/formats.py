"""Format dispatch for report renderers."""

from __future__ import annotations

from typing import Callable

from pai.output.html import render_html
from pai.output.json_report import render_json
from pai.output.text import render_text
from pai.schemas.report import Report

RENDERERS: dict[str, Callable[[Report], str]] = {
    "json": render_json,
    "text": render_text,
    "html": render_html,
}


def render_report(report: Report, fmt: str) -> str:
    """Render ``report`` as json, text or html."""
    try:
        renderer = RENDERERS[fmt]
    except KeyError:
        raise ValueError(
            f"Unknown report format {fmt!r}; expected one of: {', '.join(RENDERERS)}"
        ) from None
    return renderer(report)
