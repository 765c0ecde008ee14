"""Visibility filter — is an element on-page and perceivable right now?"""

from __future__ import annotations

import logging

from pai.engine.snapshot import Element, Viewport

logger = logging.getLogger(__name__)


def _is_zero_opacity(value: str) -> bool:
    try:
        return float(value) == 0
    except ValueError:
        return False


def is_visible(element: Element, viewport: Viewport) -> bool:
    """Return True if ``element`` has a box, is not hidden by style, and
    intersects the viewport.

    Never raises: an element without geometry, or any other failure while
    reading it, counts as not visible.
    """
    try:
        rect = element.bounding_box()
        if rect.width == 0 and rect.height == 0:
            return False
        if element.computed_style("display") == "none":
            return False
        if element.computed_style("visibility") == "hidden":
            return False
        if _is_zero_opacity(element.computed_style("opacity", "1")):
            return False
        return (
            rect.top < viewport.height
            and rect.bottom > 0
            and rect.left < viewport.width
            and rect.right > 0
        )
    except Exception as exc:
        logger.debug("Treating %r as hidden: %s", element, exc)
        return False
