"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from _snapshots import clean_page, el, page
from pai.engine.snapshot import PageSnapshot


@pytest.fixture
def tmp_config(tmp_path: Path) -> Path:
    """Write a minimal valid config YAML and return its path."""
    cfg = tmp_path / "config.yml"
    cfg.write_text(
        """\
target_url: "https://example.com"
output_format: "text"
output_directory: "{out}"
""".format(out=str(tmp_path / "output"))
    )
    return cfg


@pytest.fixture
def clean_snapshot() -> PageSnapshot:
    return clean_page()


@pytest.fixture
def messy_snapshot() -> PageSnapshot:
    """A page that trips every default check at least once."""
    return page(
        el("img", attrs={"src": "hero.jpg", "class": "hero wide"}),
        el("p", "Faint text", attrs={"id": "faint"}, style={"color": "rgb(200, 200, 200)"}),
        el("button", attrs={"aria-label": "Close", "class": "close"}),
        el("div", "Menu", attrs={"role": "made-up-role"}),
        el("span", "Skip", attrs={"tabindex": "-5"}),
        el("div", "Click me", attrs={"onclick": "go()"}),
        el("table", el("tr", el("td", "cell"))),
        lang=None,
    )
