# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Custom exception hierarchy for promptwall."""

from __future__ import annotations

from pathlib import Path


class PromptwallError(Exception):
    """Base exception for all promptwall errors."""


class ConfigurationError(PromptwallError):
    """Invalid or missing configuration."""


class ProviderError(PromptwallError):
    """A provider call failed after its retry budget was exhausted."""


class ScanInvariantError(PromptwallError):
    """Internal contract violation during a scan (a bug, not bad input)."""


# ---------------------------------------------------------------------------
# Rule loading errors (fatal, raised before any scan begins)
# ---------------------------------------------------------------------------


class RuleError(PromptwallError):
    """The rule set is malformed and cannot be scored safely."""

    def __init__(self, message: str, rule_id: str | None = None) -> None:
        super().__init__(message)
        self.rule_id = rule_id


class EmptyIdError(RuleError):
    def __init__(self) -> None:
        super().__init__("rule id must not be blank")


class DuplicateIdError(RuleError):
    def __init__(self, rule_id: str) -> None:
        super().__init__(f"duplicate rule id `{rule_id}`", rule_id)


class InvalidPatternError(RuleError):
    def __init__(self, rule_id: str, cause: str) -> None:
        super().__init__(f"rule `{rule_id}` has an invalid pattern: {cause}", rule_id)
        self.cause = cause


class WeightOutOfRangeError(RuleError):
    def __init__(self, rule_id: str, value: float) -> None:
        super().__init__(
            f"rule `{rule_id}` weight must be within 0.0..=100.0 (got {value})", rule_id
        )
        self.value = value


class EmptyPatternError(RuleError):
    def __init__(self, rule_id: str) -> None:
        super().__init__(f"rule `{rule_id}` pattern must not be empty", rule_id)


class InvalidWindowError(RuleError):
    def __init__(self, rule_id: str, window: int) -> None:
        super().__init__(
            f"rule `{rule_id}` window must be > 0 when specified (got {window})", rule_id
        )
        self.window = window


class RuleFormatError(RuleError):
    """A rule source file could not be parsed."""

    def __init__(self, path: Path, reason: str, line: int | None = None) -> None:
        location = f"{path}:{line}" if line is not None else str(path)
        super().__init__(f"invalid rule source at {location}: {reason}")
        self.path = path
        self.line = line
