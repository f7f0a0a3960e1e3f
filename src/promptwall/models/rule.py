# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Detection rule model and family derivation."""

from __future__ import annotations

from typing import Any, NewType

from pydantic import BaseModel, ConfigDict, Field, model_validator

from promptwall.core.constants import (
    DEFAULT_CONTEXT_WINDOW,
    FAMILY_SEPARATORS,
    MAX_RULE_WEIGHT,
    MIN_RULE_WEIGHT,
    RuleKind,
)
from promptwall.core.exceptions import (
    EmptyIdError,
    EmptyPatternError,
    InvalidWindowError,
    WeightOutOfRangeError,
)

RuleFamily = NewType("RuleFamily", str)


def derive_family(rule_id: str) -> RuleFamily:
    """Return the family prefix of *rule_id*.

    The family is everything before the first separator character, so
    ``INSTR_OVERRIDE`` and ``INSTR_IGNORE`` both belong to ``INSTR``.  An id
    without a separator is its own family.  A leading separator never yields
    an empty family.
    """
    for idx, char in enumerate(rule_id):
        if char in FAMILY_SEPARATORS and idx > 0:
            return RuleFamily(rule_id[:idx])
    return RuleFamily(rule_id)


class Rule(BaseModel):
    """A single detection rule.  Immutable once constructed."""

    model_config = ConfigDict(frozen=True)

    id: str
    description: str = ""
    kind: RuleKind
    pattern: str
    weight: float
    window: int | None = None
    family: str = Field(default="", description="Derived from id; any supplied value is ignored")

    @model_validator(mode="before")
    @classmethod
    def _derive_family(cls, data: Any) -> Any:
        if isinstance(data, dict) and isinstance(data.get("id"), str):
            data = {**data, "family": derive_family(data["id"])}
        return data

    @model_validator(mode="after")
    def _check_invariants(self) -> Rule:
        if not self.id.strip():
            raise EmptyIdError()
        if not self.pattern:
            raise EmptyPatternError(self.id)
        if not MIN_RULE_WEIGHT <= self.weight <= MAX_RULE_WEIGHT:
            raise WeightOutOfRangeError(self.id, self.weight)
        if self.window is not None and self.window <= 0:
            raise InvalidWindowError(self.id, self.window)
        return self

    @property
    def context_window(self) -> int:
        return self.window if self.window is not None else DEFAULT_CONTEXT_WINDOW
