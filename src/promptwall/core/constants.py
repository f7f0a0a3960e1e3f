# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Enumerations, defaults, and threshold constants."""

from enum import StrEnum


class RuleKind(StrEnum):
    KEYWORD = "keyword"
    PATTERN = "pattern"


class RiskBand(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class VerdictLabel(StrEnum):
    SAFE = "safe"
    SUSPICIOUS = "suspicious"
    MALICIOUS = "malicious"
    UNKNOWN = "unknown"


# Rule invariants
MIN_RULE_WEIGHT = 0.0
MAX_RULE_WEIGHT = 100.0
DEFAULT_CONTEXT_WINDOW = 64
FAMILY_SEPARATORS = "_-.:/"

# Finding excerpts
MAX_EXCERPT_CHARS = 240
REDACTION_PLACEHOLDER = "[REDACTED]"

# Scoring defaults
DEFAULT_FAMILY_DAMPENING = 0.5
DEFAULT_BASELINE_CHARS = 800
DEFAULT_MIN_LENGTH_FACTOR = 0.5
DEFAULT_MAX_LENGTH_FACTOR = 1.5
RISK_THRESHOLD_MEDIUM = 25.0
RISK_THRESHOLD_HIGH = 60.0
MAX_RISK_SCORE = 100.0

# Provider request/response limits
MAX_PROMPT_EXCERPT_CHARS = 800
MAX_RATIONALE_WORDS = 40

# Rule pack file names
KEYWORDS_FILE = "keywords.txt"
PATTERN_FILES = ("patterns.json", "patterns.yaml", "patterns.yml")
