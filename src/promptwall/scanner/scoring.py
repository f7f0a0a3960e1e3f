# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Family-dampened, length-normalized risk scoring."""

from __future__ import annotations

from promptwall.core.constants import MAX_RISK_SCORE
from promptwall.models.finding import Finding
from promptwall.models.score import FamilyContribution, RiskConfig, ScoreBreakdown


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def length_factor(text_length_chars: int, config: RiskConfig) -> float:
    """Scale factor that discounts short inputs and boosts long ones."""
    return _clamp(
        text_length_chars / config.baseline_chars,
        config.min_length_factor,
        config.max_length_factor,
    )


def score(
    findings: list[Finding],
    text_length_chars: int,
    config: RiskConfig | None = None,
) -> ScoreBreakdown:
    """Aggregate *findings* into a bounded, explainable score.

    Findings are consumed in the order given, which is the assembler's
    severity-first order.  The first finding of each family counts in full;
    every later one in the same family is multiplied by
    ``config.family_dampening``.

    Parameters
    ----------
    findings:
        Ordered findings for one scan.
    text_length_chars:
        Length of the scanned text in characters.
    config:
        Scoring parameters; defaults apply when omitted.

    Returns
    -------
    ScoreBreakdown
        Totals, length factor, clamped score, band and per-family shares
        ordered by each family's first appearance.
    """
    config = config or RiskConfig()

    contributions: dict[str, FamilyContribution] = {}
    raw_total = 0.0
    adjusted_total = 0.0

    for finding in findings:
        entry = contributions.get(finding.family)
        if entry is None:
            adjusted = finding.weight
            entry = FamilyContribution(
                family=finding.family, occurrences=0, raw_weight=0.0, adjusted_weight=0.0
            )
            contributions[finding.family] = entry
        else:
            adjusted = finding.weight * config.family_dampening

        entry.occurrences += 1
        entry.raw_weight += finding.weight
        entry.adjusted_weight += adjusted
        raw_total += finding.weight
        adjusted_total += adjusted

    factor = length_factor(text_length_chars, config)
    risk_score = _clamp(adjusted_total * factor, 0.0, MAX_RISK_SCORE)

    return ScoreBreakdown(
        raw_total=raw_total,
        adjusted_total=adjusted_total,
        length_factor=factor,
        risk_score=risk_score,
        risk_band=config.band_for(risk_score),
        family_contributions=list(contributions.values()),
    )
