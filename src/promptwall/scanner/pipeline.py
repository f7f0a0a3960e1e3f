# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Scan pipeline: matcher -> assembler -> scorer, plus optional verdict enrichment."""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from promptwall.core.exceptions import ProviderError
from promptwall.models.report import ScanReport
from promptwall.models.score import RiskConfig
from promptwall.rules.store import RuleSet
from promptwall.scanner import assembler, matcher, scoring
from promptwall.verdict.normalizer import failure_verdict, normalize
from promptwall.verdict.prompts import build_request, summarize_findings

if TYPE_CHECKING:
    from promptwall.providers.base import ProviderClient

logger = logging.getLogger("promptwall.scanner.pipeline")


class TextScanner:
    """Runs the heuristic detection pipeline against a shared :class:`RuleSet`.

    The scanner holds no per-scan state, so one instance can serve any number
    of scans (for example every iteration of a tail loop).
    """

    def __init__(self, rule_set: RuleSet, risk_config: RiskConfig | None = None) -> None:
        self._rule_set = rule_set
        self._risk_config = risk_config or RiskConfig()

    @property
    def rule_set(self) -> RuleSet:
        return self._rule_set

    @property
    def risk_config(self) -> RiskConfig:
        return self._risk_config

    def scan(self, text: str) -> ScanReport:
        """Scan *text* and return a heuristic-only report."""
        start_time = time.monotonic()

        raw_matches = matcher.scan(text, self._rule_set)
        findings = assembler.assemble(raw_matches, text, self._rule_set)
        breakdown = scoring.score(findings, len(text), self._risk_config)

        elapsed_ms = int((time.monotonic() - start_time) * 1000)
        logger.info(
            "Scan complete: band=%s risk=%.1f findings=%d chars=%d duration=%dms",
            breakdown.risk_band,
            breakdown.risk_score,
            len(findings),
            len(text),
            elapsed_ms,
            extra={
                "risk_band": str(breakdown.risk_band),
                "risk_score": round(breakdown.risk_score, 2),
                "findings": len(findings),
                "chars": len(text),
                "duration_ms": elapsed_ms,
            },
        )
        return ScanReport.from_breakdown(findings, len(text), breakdown)


async def enrich_report(report: ScanReport, text: str, client: ProviderClient) -> ScanReport:
    """Ask *client* for a verdict and return a copy of *report* carrying it.

    Provider failures become an ``unknown`` verdict; the heuristic result is
    never lost.  Cancellation propagates to the caller.
    """
    prompt = build_request(text, summarize_findings(report.findings), report.risk_score)
    try:
        raw = await client.complete(prompt)
    except ProviderError as exc:
        logger.warning(
            "Provider %s failed: %s", client.name, exc, extra={"provider": client.name}
        )
        verdict = failure_verdict(str(exc))
    else:
        verdict = normalize(raw)

    return report.model_copy(update={"llm_verdict": verdict})
