"""URL helpers shared by the config schema and the CLI."""

from __future__ import annotations

from datetime import date
from urllib.parse import urlparse

_EXTENSIONS = {"json": "json", "text": "txt", "html": "html"}


def is_valid_url(value: str) -> bool:
    """Return True for absolute http(s) URLs with a host."""
    try:
        parsed = urlparse(value)
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def report_filename(fmt: str, *, on: date | None = None) -> str:
    """Dated download name, e.g. ``accessibility-report-2024-05-01.html``."""
    day = (on or date.today()).isoformat()
    return f"accessibility-report-{day}.{_EXTENSIONS.get(fmt, fmt)}"
