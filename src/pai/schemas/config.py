"""Configuration schema — validates audit-config.yml."""

from typing import Literal

from pydantic import BaseModel, field_validator, model_validator

from pai.shared.urls import is_valid_url

# Names accepted in ``disabled_checks``; must match the registry in pai.engine.checks.
KNOWN_CHECKS = {
    "images",
    "headings",
    "contrast",
    "aria",
    "keyboard",
    "semantics",
    "language",
    "empty_alt",
    "form_labels",
    "skip_links",
}


class AuditConfig(BaseModel):
    """Top-level configuration loaded from audit-config.yml.

    Every field has a default so an empty mapping is a valid config; the
    target URL can also be given on the command line.
    """

    target_url: str = ""

    # Output
    output_format: Literal["json", "text", "html"] = "json"
    output_directory: str = "./output"

    # Browser capture
    viewport_width: int = 1280
    viewport_height: int = 800
    wait_ms: int = 1000
    timeout_ms: int = 30_000

    # Hard caps on contrast work for very large pages
    max_text_candidates: int = 1500
    max_contrast_checks: int = 1000

    # Rule selection
    extended_checks: bool = False  # empty alt, form labels, skip links
    disabled_checks: list[str] = []

    @field_validator("target_url")
    @classmethod
    def check_target_url(cls, v: str) -> str:
        v = v.strip()
        if v and not is_valid_url(v):
            raise ValueError(f"target_url must be an http:// or https:// URL, got {v!r}")
        return v

    @field_validator("disabled_checks")
    @classmethod
    def check_disabled_names(cls, v: list[str]) -> list[str]:
        unknown = sorted(set(v) - KNOWN_CHECKS)
        if unknown:
            raise ValueError(f"Unknown check name(s) in disabled_checks: {', '.join(unknown)}")
        return v

    @model_validator(mode="after")
    def check_caps(self) -> "AuditConfig":
        if self.max_text_candidates < 0 or self.max_contrast_checks < 0:
            raise ValueError("Contrast caps must not be negative")
        if self.viewport_width <= 0 or self.viewport_height <= 0:
            raise ValueError("Viewport dimensions must be positive")
        return self
