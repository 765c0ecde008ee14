"""Contrast evaluator — WCAG AA/AAA text contrast for a single element.

WCAG 2.1 thresholds:
- Normal text: 4.5:1 (AA), 7:1 (AAA)
- Large text (>= 24px, or >= 18.66px at weight 700+): 3:1 (AA), 4.5:1 (AAA)
"""

from __future__ import annotations

import logging
import re

from pydantic import BaseModel, ConfigDict

from pai.engine.colors import (
    BackgroundResolver,
    contrast_ratio,
    parse_color,
    resolve_background,
    suggest_contrast_improvements,
)
from pai.engine.snapshot import Element

logger = logging.getLogger(__name__)

LARGE_TEXT_PX = 24.0
LARGE_BOLD_TEXT_PX = 18.66
BOLD_WEIGHT = 700

AA_NORMAL = 4.5
AA_LARGE = 3.0
AAA_NORMAL = 7.0
AAA_LARGE = 4.5

_BASE_FONT_PX = 16.0
_RE_LENGTH = re.compile(r"^([\d.]+)\s*(px|pt|r?em|%)?$")


class ContrastResult(BaseModel):
    """Contrast measurement for one text element."""

    model_config = ConfigDict(frozen=True)

    ratio: float
    font_size_px: float
    font_weight: int
    required_aa: float
    required_aaa: float
    meets_aa: bool
    meets_aaa: bool
    foreground: str
    background: str
    suggestions: list[str] = []


def parse_font_size(value: str) -> float | None:
    """CSS font-size to pixels. Relative units use a 16px base."""
    m = _RE_LENGTH.match(value.strip().lower()) if value else None
    if not m:
        return None
    try:
        number = float(m.group(1))
    except ValueError:
        return None
    unit = m.group(2) or "px"
    if unit == "pt":
        return number * 4 / 3
    if unit in ("em", "rem"):
        return number * _BASE_FONT_PX
    if unit == "%":
        return number / 100 * _BASE_FONT_PX
    return number


def parse_font_weight(value: str) -> int:
    text = (value or "").strip().lower()
    if text in ("bold", "bolder"):
        return BOLD_WEIGHT
    m = re.match(r"^\d+", text)
    return int(m.group(0)) if m and int(m.group(0)) else 400


def is_large_text(font_size_px: float, font_weight: int) -> bool:
    return font_size_px >= LARGE_TEXT_PX or (
        font_size_px >= LARGE_BOLD_TEXT_PX and font_weight >= BOLD_WEIGHT
    )


def required_contrast_ratio(font_size_px: float, font_weight: int) -> float:
    """AA ratio required for text of this size and weight."""
    return AA_LARGE if is_large_text(font_size_px, font_weight) else AA_NORMAL


class ContrastEvaluator:
    """Evaluates text contrast for elements, using an injected background resolver."""

    def __init__(self, resolver: BackgroundResolver = resolve_background) -> None:
        self._resolve_background = resolver

    def evaluate(self, element: Element) -> ContrastResult | None:
        """Return the contrast result, or None when color or font data is missing."""
        text_color = element.computed_style("color")
        background = self._resolve_background(element)
        if not text_color or not background:
            return None

        fg = parse_color(text_color)
        bg = parse_color(background)
        font_size = parse_font_size(element.computed_style("font-size"))
        if fg is None or bg is None or font_size is None:
            logger.debug(
                "Skipping contrast for %r: color=%r background=%r font-size=%r",
                element, text_color, background, element.computed_style("font-size"),
            )
            return None
        font_weight = parse_font_weight(element.computed_style("font-weight"))

        ratio = contrast_ratio(fg, bg)
        required_aa = required_contrast_ratio(font_size, font_weight)
        required_aaa = AAA_LARGE if required_aa == AA_LARGE else AAA_NORMAL
        meets_aa = ratio >= required_aa

        return ContrastResult(
            ratio=ratio,
            font_size_px=font_size,
            font_weight=font_weight,
            required_aa=required_aa,
            required_aaa=required_aaa,
            meets_aa=meets_aa,
            meets_aaa=ratio >= required_aaa,
            foreground=text_color,
            background=background,
            suggestions=[] if meets_aa else suggest_contrast_improvements(fg, bg, required_aa),
        )
