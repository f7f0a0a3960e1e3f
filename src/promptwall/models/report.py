# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""End-to-end scan report."""

from __future__ import annotations

from pydantic import BaseModel, Field

from promptwall.core.constants import RiskBand
from promptwall.models.finding import Finding
from promptwall.models.score import ScoreBreakdown
from promptwall.models.verdict import Verdict


class ScanReport(BaseModel):
    """Heuristic score merged with the optional provider verdict."""

    risk_score: float = Field(ge=0.0, le=100.0)
    risk_band: RiskBand
    findings: list[Finding] = Field(default_factory=list)
    normalized_len: int = Field(
        description=(
            "Length of the scanned text in Unicode characters (code points), "
            "not UTF-8 bytes; finding spans are byte offsets"
        )
    )
    score_breakdown: ScoreBreakdown = Field(default_factory=ScoreBreakdown)
    llm_verdict: Verdict | None = None

    @classmethod
    def from_breakdown(
        cls,
        findings: list[Finding],
        normalized_len: int,
        breakdown: ScoreBreakdown,
        llm_verdict: Verdict | None = None,
    ) -> ScanReport:
        return cls(
            risk_score=breakdown.risk_score,
            risk_band=breakdown.risk_band,
            findings=findings,
            normalized_len=normalized_len,
            score_breakdown=breakdown,
            llm_verdict=llm_verdict,
        )
