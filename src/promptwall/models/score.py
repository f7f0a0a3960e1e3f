# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Risk scoring configuration and breakdown models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator

from promptwall.core.constants import (
    DEFAULT_BASELINE_CHARS,
    DEFAULT_FAMILY_DAMPENING,
    DEFAULT_MAX_LENGTH_FACTOR,
    DEFAULT_MIN_LENGTH_FACTOR,
    RISK_THRESHOLD_HIGH,
    RISK_THRESHOLD_MEDIUM,
    RiskBand,
)


class RiskConfig(BaseModel):
    """Tunable parameters of the risk scorer."""

    model_config = ConfigDict(frozen=True)

    family_dampening: float = Field(default=DEFAULT_FAMILY_DAMPENING, ge=0.0, le=1.0)
    baseline_chars: int = Field(default=DEFAULT_BASELINE_CHARS, gt=0)
    min_length_factor: float = Field(default=DEFAULT_MIN_LENGTH_FACTOR, ge=0.0)
    max_length_factor: float = Field(default=DEFAULT_MAX_LENGTH_FACTOR, ge=0.0)
    medium_threshold: float = Field(default=RISK_THRESHOLD_MEDIUM, ge=0.0, le=100.0)
    high_threshold: float = Field(default=RISK_THRESHOLD_HIGH, ge=0.0, le=100.0)

    @model_validator(mode="after")
    def _check_ordering(self) -> RiskConfig:
        if self.min_length_factor > self.max_length_factor:
            msg = "min_length_factor must not exceed max_length_factor"
            raise ValueError(msg)
        if self.medium_threshold > self.high_threshold:
            msg = "medium_threshold must not exceed high_threshold"
            raise ValueError(msg)
        return self

    def band_for(self, score: float) -> RiskBand:
        if score >= self.high_threshold:
            return RiskBand.HIGH
        if score >= self.medium_threshold:
            return RiskBand.MEDIUM
        return RiskBand.LOW


class FamilyContribution(BaseModel):
    """Per-family share of the score."""

    family: str
    occurrences: int
    raw_weight: float
    adjusted_weight: float


class ScoreBreakdown(BaseModel):
    """Explainable result of scoring one finding set."""

    raw_total: float = 0.0
    adjusted_total: float = 0.0
    length_factor: float = 1.0
    risk_score: float = Field(default=0.0, ge=0.0, le=100.0)
    risk_band: RiskBand = RiskBand.LOW
    family_contributions: list[FamilyContribution] = Field(default_factory=list)
