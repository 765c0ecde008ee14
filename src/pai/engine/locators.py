"""Selector and snippet helpers, plus Finding constructors used by the checks."""

from __future__ import annotations

import logging

from pai.engine.snapshot import Element
from pai.schemas.report import SNIPPET_LIMIT, Category, ContrastDetails, Finding, Severity

logger = logging.getLogger(__name__)

UNKNOWN_SELECTOR = "unknown"


def selector_for(element: Element | None) -> str:
    """Best-effort locator: ``#id``, then ``tag.firstclass``, then the tag name."""
    if element is None or not getattr(element, "tag", ""):
        return UNKNOWN_SELECTOR
    try:
        if element.id:
            return f"#{element.id}"
        first_class = element.class_name.split(" ")[0]
        if first_class:
            return f"{element.tag}.{first_class}"
        return element.tag
    except Exception as exc:
        logger.debug("Selector fallback for %r: %s", element, exc)
        return element.tag or UNKNOWN_SELECTOR


def snippet_for(element: Element) -> str:
    return element.outer_html(limit=SNIPPET_LIMIT)


def element_finding(
    element: Element,
    *,
    severity: Severity,
    category: Category,
    message: str,
    selector: str | None = None,
    details: ContrastDetails | None = None,
) -> Finding:
    return Finding(
        severity=severity,
        category=category,
        message=message,
        element_snippet=snippet_for(element),
        selector=selector or selector_for(element),
        details=details,
    )


def page_finding(*, severity: Severity, category: Category, message: str) -> Finding:
    return Finding(severity=severity, category=category, message=message)
