"""Rule checks — each inspects a snapshot and returns zero or more findings.

Checks are plain callables ``(Snapshot) -> list[Finding]`` registered in
order as ``Check`` entries. The runner executes them in list order and
isolates failures, so a check may raise freely.
"""

from __future__ import annotations

import logging
import re
from typing import Callable, Sequence

from pydantic import BaseModel, ConfigDict

from pai.engine.colors import BackgroundResolver, resolve_background
from pai.engine.contrast import ContrastEvaluator
from pai.engine.locators import element_finding, page_finding
from pai.engine.snapshot import Element, Snapshot
from pai.engine.visibility import is_visible
from pai.schemas.report import ContrastDetails, Finding

logger = logging.getLogger(__name__)

CheckFunc = Callable[[Snapshot], list[Finding]]

MAX_TEXT_CANDIDATES = 1500
MAX_CONTRAST_CHECKS = 1000

HEADING_TAGS = ("h1", "h2", "h3", "h4", "h5", "h6")
INTERACTIVE_TAGS = {"button", "a", "input", "select", "textarea"}

VALID_ARIA_ROLES = frozenset({
    "button", "checkbox", "dialog", "gridcell", "link", "listbox",
    "option", "progressbar", "radio", "slider", "tab", "tabpanel",
    "textbox", "menu", "menubar", "menuitem", "navigation", "banner",
    "main", "complementary", "contentinfo", "search", "form",
})

_LABELLED_INPUT_TYPES = {"text", "email", "password"}
_SKIP_LINK_TARGETS = ("#main", "#content")
_RE_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


class Check(BaseModel):
    """A named rule check."""

    model_config = ConfigDict(frozen=True)

    name: str
    run: CheckFunc


def _parse_int_prefix(value: str) -> int | None:
    """Leading integer of ``value`` (``"-2abc"`` -> -2), or None."""
    m = _RE_LEADING_INT.match(value)
    return int(m.group(1)) if m else None


# ── Images ─────────────────────────────────────────────────────────


def check_images(snapshot: Snapshot) -> list[Finding]:
    return [
        element_finding(img, severity="error", category="images",
                        message="Image missing alt attribute")
        for img in snapshot.query_all("img")
        if not img.has_attribute("alt") and is_visible(img, snapshot.viewport)
    ]


# ── Headings ───────────────────────────────────────────────────────


def check_headings(snapshot: Snapshot) -> list[Finding]:
    if snapshot.query_all(*HEADING_TAGS):
        return []
    return [page_finding(severity="warning", category="headings",
                         message="No headings found on the page")]


# ── Contrast ───────────────────────────────────────────────────────


def collect_text_elements(snapshot: Snapshot, limit: int = MAX_TEXT_CANDIDATES) -> list[Element]:
    """Visible body descendants with non-blank text, in document order.

    Stops as soon as ``limit`` elements are collected.
    """
    body = snapshot.body
    if body is None or limit <= 0:
        return []
    elements: list[Element] = []
    for el in body.iter_descendants():
        if not is_visible(el, snapshot.viewport):
            continue
        if el.text_content().strip():
            elements.append(el)
            if len(elements) >= limit:
                logger.debug("Text candidate cap of %d reached", limit)
                break
    return elements


class ContrastCheck:
    """Flags visible text whose contrast fails WCAG AA."""

    def __init__(
        self,
        evaluator: ContrastEvaluator | None = None,
        *,
        max_text_candidates: int = MAX_TEXT_CANDIDATES,
        max_contrast_checks: int = MAX_CONTRAST_CHECKS,
    ) -> None:
        self.evaluator = evaluator or ContrastEvaluator()
        self.max_text_candidates = max_text_candidates
        self.max_contrast_checks = max_contrast_checks

    def __call__(self, snapshot: Snapshot) -> list[Finding]:
        candidates = collect_text_elements(snapshot, self.max_text_candidates)
        candidates = candidates[: self.max_contrast_checks]
        logger.debug("Evaluating contrast for %d element(s)", len(candidates))

        findings: list[Finding] = []
        for el in candidates:
            result = self.evaluator.evaluate(el)
            if result is None or result.meets_aa:
                continue
            findings.append(element_finding(
                el,
                severity="error",
                category="contrast",
                message=(
                    f"Insufficient contrast: {result.ratio:.2f}:1 "
                    f"(required {result.required_aa:g}:1)"
                ),
                details=ContrastDetails(
                    ratio=round(result.ratio, 2),
                    required_ratio=result.required_aa,
                    font_size=f"{result.font_size_px:g}px",
                    font_weight=result.font_weight,
                    text_color=result.foreground,
                    background_color=result.background,
                    suggestions=result.suggestions,
                ),
            ))
        return findings


# ── ARIA ───────────────────────────────────────────────────────────


def is_valid_aria_role(role: str) -> bool:
    return role in VALID_ARIA_ROLES


def check_aria(snapshot: Snapshot) -> list[Finding]:
    findings: list[Finding] = []

    for el in snapshot.query_all(attr="aria-label"):
        if not is_visible(el, snapshot.viewport):
            continue
        has_text = bool(el.text_content().strip())
        has_alt_image = el.find_first(lambda d: d.tag == "img" and d.has_attribute("alt"))
        if not has_text and has_alt_image is None:
            findings.append(element_finding(
                el, severity="warning", category="aria",
                message="Element with aria-label without visible text content",
            ))

    for el in snapshot.query_all(attr="role"):
        role = el.get_attribute("role") or ""
        if role and not is_valid_aria_role(role):
            findings.append(element_finding(
                el, severity="warning", category="aria",
                message=f"Invalid ARIA role: {role}",
            ))

    return findings


# ── Keyboard ───────────────────────────────────────────────────────


def check_keyboard(snapshot: Snapshot) -> list[Finding]:
    findings: list[Finding] = []

    for el in snapshot.query_all(attr="tabindex"):
        if not is_visible(el, snapshot.viewport):
            continue
        tab_index = _parse_int_prefix(el.get_attribute("tabindex") or "")
        if tab_index is not None and tab_index < -1:
            findings.append(element_finding(
                el, severity="error", category="keyboard",
                message="Invalid tabindex value",
            ))

    # Native controls are focusable without tabindex, so this over-reports;
    # kept as a review prompt for custom widgets.
    for el in snapshot.query_all():
        if el.tag not in INTERACTIVE_TAGS and not el.has_click_handler:
            continue
        if not is_visible(el, snapshot.viewport):
            continue
        if el.has_attribute("tabindex") or el.disabled:
            continue
        if el.computed_style("pointer-events") == "none" or el.computed_style("display") == "none":
            continue
        findings.append(element_finding(
            el, severity="warning", category="keyboard",
            message="Interactive element may not be keyboard accessible",
        ))

    return findings


# ── Semantics ──────────────────────────────────────────────────────


def check_semantics(snapshot: Snapshot) -> list[Finding]:
    findings: list[Finding] = []

    for div in snapshot.query_all("div"):
        if not (div.has_click_handler or div.get_attribute("role") == "button"):
            continue
        if not is_visible(div, snapshot.viewport):
            continue
        findings.append(element_finding(
            div, severity="warning", category="semantics",
            message="Using div instead of button for interactive element",
        ))

    for table in snapshot.query_all("table"):
        if table.has_attribute("role"):
            continue
        has_header = table.find_first(lambda d: d.tag == "th") is not None
        if not has_header and not table.get_attribute("summary"):
            findings.append(element_finding(
                table, severity="warning", category="semantics",
                message="Possible table usage for layout",
            ))

    return findings


# ── Language ───────────────────────────────────────────────────────


def check_language(snapshot: Snapshot) -> list[Finding]:
    root = snapshot.document_element
    if root.get_attribute("lang"):
        return []
    return [element_finding(
        root, severity="error", category="language",
        message="Missing lang attribute on html element", selector="html",
    )]


# ── Extended checks ────────────────────────────────────────────────


def check_empty_alt(snapshot: Snapshot) -> list[Finding]:
    return [
        element_finding(img, severity="warning", category="images",
                        message="Image alt attribute is empty (decorative image)")
        for img in snapshot.query_all("img")
        if img.get_attribute("alt") == "" and is_visible(img, snapshot.viewport)
    ]


def check_form_labels(snapshot: Snapshot) -> list[Finding]:
    label_targets = {
        label.get_attribute("for") for label in snapshot.query_all("label", attr="for")
    }
    findings: list[Finding] = []
    for el in snapshot.query_all("input", "textarea"):
        if el.tag == "input" and el.get_attribute("type") not in _LABELLED_INPUT_TYPES:
            continue
        if not el.id or el.id not in label_targets:
            findings.append(element_finding(
                el, severity="warning", category="forms",
                message="Input without associated label",
            ))
    return findings


def check_skip_links(snapshot: Snapshot) -> list[Finding]:
    for el in snapshot.query_all(attr="href"):
        if (el.get_attribute("href") or "").startswith(_SKIP_LINK_TARGETS):
            return []
    return [page_finding(severity="warning", category="navigation",
                         message="Skip navigation links are missing")]


# ── Registry ───────────────────────────────────────────────────────


def build_checks(
    *,
    resolver: BackgroundResolver = resolve_background,
    max_text_candidates: int = MAX_TEXT_CANDIDATES,
    max_contrast_checks: int = MAX_CONTRAST_CHECKS,
    extended: bool = False,
    disabled: Sequence[str] = (),
) -> list[Check]:
    """Return the ordered check list.

    Order is fixed: images, headings, contrast, aria, keyboard, semantics,
    language, then the extended checks when requested.
    """
    contrast = ContrastCheck(
        ContrastEvaluator(resolver),
        max_text_candidates=max_text_candidates,
        max_contrast_checks=max_contrast_checks,
    )
    checks = [
        Check(name="images", run=check_images),
        Check(name="headings", run=check_headings),
        Check(name="contrast", run=contrast),
        Check(name="aria", run=check_aria),
        Check(name="keyboard", run=check_keyboard),
        Check(name="semantics", run=check_semantics),
        Check(name="language", run=check_language),
    ]
    if extended:
        checks += [
            Check(name="empty_alt", run=check_empty_alt),
            Check(name="form_labels", run=check_form_labels),
            Check(name="skip_links", run=check_skip_links),
        ]
    skip = set(disabled)
    return [c for c in checks if c.name not in skip]


DEFAULT_CHECKS: tuple[Check, ...] = tuple(build_checks())
EXTENDED_CHECKS: tuple[Check, ...] = tuple(build_checks(extended=True))[len(DEFAULT_CHECKS):]
