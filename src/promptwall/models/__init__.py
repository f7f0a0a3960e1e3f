# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Domain models for promptwall."""

from promptwall.models.finding import Finding, RawMatch, Span
from promptwall.models.report import ScanReport
from promptwall.models.rule import Rule, RuleFamily, derive_family
from promptwall.models.score import FamilyContribution, RiskConfig, ScoreBreakdown
from promptwall.models.verdict import Verdict

__all__ = [
    "FamilyContribution",
    "Finding",
    "RawMatch",
    "RiskConfig",
    "Rule",
    "RuleFamily",
    "ScanReport",
    "ScoreBreakdown",
    "Span",
    "Verdict",
    "derive_family",
]
