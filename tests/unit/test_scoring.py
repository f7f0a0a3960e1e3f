# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Tests for family-dampened, length-normalized scoring."""

from __future__ import annotations

import pytest

from promptwall.core.constants import RiskBand
from promptwall.models.finding import Finding
from promptwall.models.score import RiskConfig
from promptwall.scanner.scoring import length_factor, score


def _make_finding(rule_id: str, weight: float, family: str | None = None, start: int = 0) -> Finding:
    return Finding(
        rule_id=rule_id,
        span=(start, start + 1),
        excerpt="x",
        weight=weight,
        family=family or rule_id.split("_")[0],
    )


class TestLengthFactor:
    @pytest.mark.parametrize(
        ("chars", "expected"),
        [(0, 0.5), (40, 0.5), (400, 0.5), (800, 1.0), (1000, 1.25), (1200, 1.5), (100_000, 1.5)],
    )
    def test_clamped_ratio(self, chars: int, expected: float) -> None:
        assert length_factor(chars, RiskConfig()) == pytest.approx(expected)

    def test_custom_baseline(self) -> None:
        config = RiskConfig(baseline_chars=100, min_length_factor=0.0)
        assert length_factor(50, config) == pytest.approx(0.5)


class TestScore:
    def test_no_findings(self) -> None:
        breakdown = score([], 0)
        assert breakdown.risk_score == 0.0
        assert breakdown.risk_band == RiskBand.LOW
        assert breakdown.family_contributions == []

    def test_single_keyword_short_text(self) -> None:
        breakdown = score([_make_finding("INSTR_IGNORE", 30)], 40)
        assert breakdown.length_factor == pytest.approx(0.5)
        assert breakdown.risk_score == pytest.approx(15.0)
        assert breakdown.risk_band == RiskBand.LOW

    def test_same_family_dampened(self) -> None:
        breakdown = score([_make_finding("INSTR_A", 30), _make_finding("INSTR_B", 20)], 800)
        assert breakdown.raw_total == pytest.approx(50.0)
        assert breakdown.adjusted_total == pytest.approx(40.0)
        (contribution,) = breakdown.family_contributions
        assert contribution.family == "INSTR"
        assert contribution.occurrences == 2
        assert contribution.adjusted_weight == pytest.approx(40.0)

    def test_distinct_families_not_dampened(self) -> None:
        breakdown = score([_make_finding("INSTR_A", 30), _make_finding("CODE_B", 20)], 800)
        assert breakdown.adjusted_total == pytest.approx(50.0)
        assert [c.family for c in breakdown.family_contributions] == ["INSTR", "CODE"]

    def test_clamped_to_hundred(self) -> None:
        findings = [_make_finding(f"F{i}_X", 100) for i in range(5)]
        breakdown = score(findings, 5000)
        assert breakdown.risk_score == 100.0
        assert breakdown.risk_band == RiskBand.HIGH

    def test_bands(self) -> None:
        assert score([_make_finding("A_X", 24.9)], 800).risk_band == RiskBand.LOW
        assert score([_make_finding("A_X", 25)], 800).risk_band == RiskBand.MEDIUM
        assert score([_make_finding("A_X", 60)], 800).risk_band == RiskBand.HIGH

    def test_zero_dampening_ignores_repeats(self) -> None:
        config = RiskConfig(family_dampening=0.0)
        findings = [_make_finding("INSTR_A", 30), _make_finding("INSTR_B", 30)]
        assert score(findings, 800, config).adjusted_total == pytest.approx(30.0)

    @pytest.mark.parametrize("length", [0, 1, 799, 800, 801, 10_000])
    @pytest.mark.parametrize(
        "weights",
        [[], [0.0], [100.0, 100.0, 100.0], [10.0, 55.5, 3.25, 99.0], [1.0] * 40],
    )
    def test_bounds_hold(self, weights: list[float], length: int) -> None:
        findings = [_make_finding(f"FAM{i % 2}_R{i}", w, family=f"FAM{i % 2}") for i, w in enumerate(weights)]
        breakdown = score(findings, length)
        assert 0.0 <= breakdown.risk_score <= 100.0
        assert breakdown.adjusted_total <= breakdown.raw_total

    def test_deterministic(self) -> None:
        findings = [_make_finding("INSTR_A", 30), _make_finding("CODE_B", 20), _make_finding("INSTR_C", 10)]
        assert score(findings, 321) == score(list(findings), 321)
