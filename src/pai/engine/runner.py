"""Audit engine entry point — runs every check over one snapshot."""

from __future__ import annotations

import logging
from typing import Sequence

from pai.engine.aggregator import aggregate
from pai.engine.checks import Check, build_checks
from pai.engine.colors import BackgroundResolver, resolve_background
from pai.engine.locators import page_finding
from pai.engine.snapshot import Snapshot
from pai.schemas.config import AuditConfig
from pai.schemas.report import Finding, Report

logger = logging.getLogger(__name__)


class AuditEngine:
    """Runs an ordered list of checks and aggregates the results.

    A check that raises is logged and reported as a ``system`` finding;
    the remaining checks still run, so ``run`` always returns a Report.
    """

    def __init__(
        self,
        checks: Sequence[Check] | None = None,
        *,
        resolver: BackgroundResolver | None = None,
        max_text_candidates: int | None = None,
        max_contrast_checks: int | None = None,
    ) -> None:
        overrides = {
            "resolver": resolver,
            "max_text_candidates": max_text_candidates,
            "max_contrast_checks": max_contrast_checks,
        }
        given = {k: v for k, v in overrides.items() if v is not None}
        if checks is not None and given:
            raise ValueError(
                f"{', '.join(given)} cannot be combined with an explicit check list; "
                "pass them to build_checks() instead"
            )
        if checks is None:
            checks = build_checks(**given)
        self.checks: list[Check] = list(checks)

    @classmethod
    def from_config(
        cls,
        config: AuditConfig,
        *,
        resolver: BackgroundResolver = resolve_background,
    ) -> "AuditEngine":
        return cls(build_checks(
            resolver=resolver,
            max_text_candidates=config.max_text_candidates,
            max_contrast_checks=config.max_contrast_checks,
            extended=config.extended_checks,
            disabled=config.disabled_checks,
        ))

    def run_check(self, check: Check, snapshot: Snapshot) -> list[Finding]:
        try:
            findings = list(check.run(snapshot))
        except Exception as exc:
            logger.exception("Check %s failed", check.name)
            return [page_finding(
                severity="error",
                category="system",
                message=f"Check execution error in {check.name}: {exc}",
            )]
        logger.debug("Check %s: %d finding(s)", check.name, len(findings))
        return findings

    def run(self, snapshot: Snapshot, *, generated_at: str | None = None) -> Report:
        logger.info("Starting accessibility checks for %s", snapshot.url or "(snapshot)")
        findings: list[Finding] = []
        for check in self.checks:
            findings.extend(self.run_check(check, snapshot))
        report = aggregate(findings, source_url=snapshot.url, generated_at=generated_at)
        logger.info(
            "Accessibility check completed: %d issue(s) (%d error(s), %d warning(s))",
            report.summary.total, report.summary.error_count, report.summary.warning_count,
        )
        return report


def run_audit(snapshot: Snapshot, *, config: AuditConfig | None = None) -> Report:
    """Audit ``snapshot`` with the default checks (or those ``config`` selects)."""
    engine = AuditEngine.from_config(config) if config is not None else AuditEngine()
    return engine.run(snapshot)
