"""Color parsing, background resolution and WCAG contrast math."""

from __future__ import annotations

import logging
import re
from typing import Callable, NamedTuple

from pai.engine.snapshot import Element

logger = logging.getLogger(__name__)

DEFAULT_BACKGROUND = "rgb(255, 255, 255)"

# Backgrounds below this alpha are looked through to the parent
MIN_BACKGROUND_ALPHA = 0.1

_TRANSPARENT = {"transparent", "rgba(0, 0, 0, 0)"}

_RE_RGBA_ALPHA = re.compile(r"rgba\((\d+),\s*(\d+),\s*(\d+),\s*([\d.]+)\)")
_RE_FUNC = re.compile(r"^rgba?\(\s*([^)]*)\)$", re.IGNORECASE)
_RE_HEX = re.compile(r"^#([0-9a-f]{3,4}|[0-9a-f]{6}|[0-9a-f]{8})$", re.IGNORECASE)

_NAMED = {
    "black": (0, 0, 0),
    "white": (255, 255, 255),
    "red": (255, 0, 0),
    "green": (0, 128, 0),
    "lime": (0, 255, 0),
    "blue": (0, 0, 255),
    "yellow": (255, 255, 0),
    "orange": (255, 165, 0),
    "purple": (128, 0, 128),
    "gray": (128, 128, 128),
    "grey": (128, 128, 128),
    "silver": (192, 192, 192),
    "navy": (0, 0, 128),
    "maroon": (128, 0, 0),
}

BackgroundResolver = Callable[[Element], str]


class RGBA(NamedTuple):
    r: float
    g: float
    b: float
    a: float = 1.0

    def css(self) -> str:
        return f"rgb({round(self.r)}, {round(self.g)}, {round(self.b)})"


def _channel(token: str) -> float:
    if token.endswith("%"):
        return float(token[:-1]) * 255 / 100
    return float(token)


def _alpha(token: str) -> float:
    if token.endswith("%"):
        return float(token[:-1]) / 100
    return float(token)


def parse_color(value: str | None) -> RGBA | None:
    """Parse a CSS color in rgb()/rgba(), hex or basic named form.

    Returns None for anything unrecognized.
    """
    if not value:
        return None
    text = value.strip().lower()
    if text == "transparent":
        return RGBA(0, 0, 0, 0.0)
    if text in _NAMED:
        return RGBA(*_NAMED[text])

    m = _RE_HEX.match(text)
    if m:
        digits = m.group(1)
        if len(digits) in (3, 4):
            digits = "".join(c * 2 for c in digits)
        r, g, b = (int(digits[i:i + 2], 16) for i in (0, 2, 4))
        a = int(digits[6:8], 16) / 255 if len(digits) == 8 else 1.0
        return RGBA(r, g, b, a)

    m = _RE_FUNC.match(text)
    if m:
        # Both "r, g, b, a" and "r g b / a" syntaxes
        tokens = [t for t in re.split(r"[,\s/]+", m.group(1)) if t]
        try:
            if len(tokens) == 3:
                return RGBA(*(_channel(t) for t in tokens))
            if len(tokens) == 4:
                return RGBA(*(_channel(t) for t in tokens[:3]), _alpha(tokens[3]))
        except ValueError:
            return None
    return None


def alpha_of(color: str) -> float:
    """Alpha of an ``rgba(r, g, b, a)`` string; every other form counts as opaque."""
    if color.startswith("rgba"):
        m = _RE_RGBA_ALPHA.match(color)
        if m:
            return float(m.group(4))
    return 1.0


def resolve_background(element: Element) -> str:
    """Walk up from ``element`` to the first mostly-opaque background color.

    The document root element is never consulted; if nothing below it paints
    a background, the page is assumed white.
    """
    current: Element | None = element
    while current is not None and current.parent is not None:
        bg = current.computed_style("background-color")
        if bg and bg not in _TRANSPARENT and alpha_of(bg) > MIN_BACKGROUND_ALPHA:
            return bg
        current = current.parent
    return DEFAULT_BACKGROUND


def _linearize(channel: float) -> float:
    c = channel / 255
    if c <= 0.03928:
        return c / 12.92
    return ((c + 0.055) / 1.055) ** 2.4


def relative_luminance(color: RGBA) -> float:
    return (
        0.2126 * _linearize(color.r)
        + 0.7152 * _linearize(color.g)
        + 0.0722 * _linearize(color.b)
    )


def blend(top: RGBA, bottom: RGBA) -> RGBA:
    """Composite a translucent ``top`` color over an opaque ``bottom``."""
    a = top.a
    return RGBA(
        top.r * a + bottom.r * (1 - a),
        top.g * a + bottom.g * (1 - a),
        top.b * a + bottom.b * (1 - a),
    )


def contrast_ratio(foreground: RGBA, background: RGBA) -> float:
    """WCAG contrast ratio in [1, 21].

    A translucent foreground is composited over the background first.
    """
    if foreground.a < 1:
        foreground = blend(foreground, background)
    l1 = relative_luminance(foreground)
    l2 = relative_luminance(background)
    lighter, darker = max(l1, l2), min(l1, l2)
    return (lighter + 0.05) / (darker + 0.05)


def _mix(color: RGBA, target: RGBA, amount: float) -> RGBA:
    return RGBA(
        color.r + (target.r - color.r) * amount,
        color.g + (target.g - color.g) * amount,
        color.b + (target.b - color.b) * amount,
    )


_BLACK = RGBA(0, 0, 0)
_WHITE = RGBA(255, 255, 255)
_STEPS = 20


def suggest_contrast_improvements(
    foreground: RGBA, background: RGBA, required_ratio: float,
) -> list[str]:
    """Colors close to the originals that reach ``required_ratio``.

    Tries the text color pushed toward black, then toward white, then the
    background pushed toward white and black, each in 5% steps; the first
    step that passes in each direction is kept.
    """
    foreground = blend(foreground, background) if foreground.a < 1 else foreground
    suggestions: list[str] = []

    def _search(start: RGBA, target: RGBA, ratio_for: Callable[[RGBA], float]) -> None:
        for step in range(1, _STEPS + 1):
            candidate = _mix(start, target, step / _STEPS)
            if ratio_for(candidate) >= required_ratio:
                css = candidate.css()
                if css not in suggestions:
                    suggestions.append(css)
                return

    for target in (_BLACK, _WHITE):
        _search(foreground, target, lambda c: contrast_ratio(c, background))
    for target in (_WHITE, _BLACK):
        _search(background, target, lambda c: contrast_ratio(foreground, c))
    return suggestions
