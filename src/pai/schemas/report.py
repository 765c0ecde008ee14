"""Pydantic models for audit findings and the final accessibility report."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

Severity = Literal["error", "warning"]

Category = Literal[
    "images",
    "headings",
    "contrast",
    "aria",
    "keyboard",
    "semantics",
    "language",
    "forms",
    "navigation",
    "system",  # engine-internal failures only
]

SNIPPET_LIMIT = 100


class ContrastDetails(BaseModel):
    """Measured contrast data attached to a contrast finding."""

    model_config = ConfigDict(frozen=True)

    ratio: float
    required_ratio: float
    font_size: str = ""  # e.g. "16px"
    font_weight: int = 400
    text_color: str = ""
    background_color: str = ""
    suggestions: list[str] = []


class Finding(BaseModel):
    """A single detected accessibility defect.

    Element-level findings carry both ``element_snippet`` and ``selector``;
    page-level findings (e.g. no headings at all) carry neither.
    """

    model_config = ConfigDict(frozen=True)

    severity: Severity
    category: Category
    message: str = Field(min_length=1)
    element_snippet: str | None = Field(default=None, max_length=SNIPPET_LIMIT)
    selector: str | None = None
    details: ContrastDetails | None = None

    @model_validator(mode="after")
    def check_locator_pairing(self) -> "Finding":
        if (self.element_snippet is None) != (self.selector is None):
            raise ValueError(
                "element_snippet and selector must both be present or both absent"
            )
        return self

    @property
    def is_page_level(self) -> bool:
        return self.selector is None


class Summary(BaseModel):
    """Finding counts partitioned by severity."""

    model_config = ConfigDict(frozen=True)

    total: int = 0
    error_count: int = 0
    warning_count: int = 0


class Report(BaseModel):
    """The engine's sole output for one audit run."""

    model_config = ConfigDict(frozen=True)

    source_url: str = ""
    generated_at: str
    findings: list[Finding] = []
    summary: Summary = Summary()

    @model_validator(mode="after")
    def check_summary_matches_findings(self) -> "Report":
        s = self.summary
        if s.total != len(self.findings) or s.error_count + s.warning_count != s.total:
            raise ValueError(
                f"Summary {s.model_dump()} does not match {len(self.findings)} findings"
            )
        return self

    @property
    def errors(self) -> list[Finding]:
        return [f for f in self.findings if f.severity == "error"]

    @property
    def warnings(self) -> list[Finding]:
        return [f for f in self.findings if f.severity == "warning"]
