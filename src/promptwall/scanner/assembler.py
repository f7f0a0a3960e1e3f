# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Turn raw matches into ordered, redacted findings."""

from __future__ import annotations

import logging
import re

from promptwall.core.constants import MAX_EXCERPT_CHARS, REDACTION_PLACEHOLDER
from promptwall.core.exceptions import ScanInvariantError
from promptwall.models.finding import Finding, RawMatch
from promptwall.rules.store import RuleSet
from promptwall.scanner.text import char_index, utf8_offsets

logger = logging.getLogger("promptwall.scanner.assembler")

# ---------------------------------------------------------------------------
# Excerpt redaction
# ---------------------------------------------------------------------------

_EXCERPT_REDACTIONS: list[re.Pattern[str]] = [
    # Email addresses
    re.compile(
        r"[A-Za-z0-9._%+\-]{1,64}@[A-Za-z0-9\-]{1,63}(?:\.[A-Za-z0-9\-]{1,63}){0,8}\.[A-Za-z]{2,24}"
    ),
    # Vendor-prefixed keys and tokens
    re.compile(r"\bsk-(?:ant-)?[A-Za-z0-9_\-]{16,}"),
    re.compile(r"\bAKIA[A-Z0-9]{16}\b"),
    re.compile(r"\bAIza[0-9A-Za-z_\-]{35}\b"),
    re.compile(r"\bgh[pousr]_[A-Za-z0-9]{20,}"),
    re.compile(r"\bxox[abprs]-[A-Za-z0-9\-]{10,}"),
    # JSON web tokens
    re.compile(r"(?<![A-Za-z0-9_\-])eyJ[A-Za-z0-9_\-]+\.[A-Za-z0-9_\-]+\.[A-Za-z0-9_\-]+"),
    # Bearer credentials
    re.compile(r"(?i)\bbearer\s+[A-Za-z0-9\-._~+/]{16,}=*"),
]

# Long token-shaped runs; only those mixing letters and digits are redacted.
_TOKEN_RUN = re.compile(r"(?<![A-Za-z0-9_\-])[A-Za-z0-9_\-]{32,}")
_DIGIT = re.compile(r"\d")
_LETTER = re.compile(r"[A-Za-z]")

# Longest secret shape the patterns above are expected to catch whole.
_REDACTION_MARGIN = 256


def _redact_token_run(match: re.Match[str]) -> str:
    run = match.group(0)
    if _DIGIT.search(run) and _LETTER.search(run):
        return REDACTION_PLACEHOLDER
    return run


def redact_excerpt(text: str) -> str:
    """Replace email-like and credential-like substrings with a placeholder."""
    for pattern in _EXCERPT_REDACTIONS:
        text = pattern.sub(REDACTION_PLACEHOLDER, text)
    return _TOKEN_RUN.sub(_redact_token_run, text)


def extract_excerpt(text: str, start_char: int, end_char: int, window: int) -> str:
    """Slice ``[start - window, end + window]`` clamped to *text*, redact, then truncate.

    Slicing by character keeps every cut on a character boundary.  The slice
    is clipped to the excerpt cap plus a margin before redaction, so the cost
    does not grow with the length of the match.
    """
    lo = max(0, start_char - window)
    hi = min(len(text), end_char + window, lo + MAX_EXCERPT_CHARS + _REDACTION_MARGIN)
    return redact_excerpt(text[lo:hi])[:MAX_EXCERPT_CHARS]


# ---------------------------------------------------------------------------
# Assembly
# ---------------------------------------------------------------------------


def _ordering_key(finding: Finding) -> tuple[float, int, str]:
    return (-finding.weight, finding.span[0], finding.rule_id)


def assemble(raw_matches: list[RawMatch], text: str, rule_set: RuleSet) -> list[Finding]:
    """Build findings ordered by weight desc, span start asc, then rule id.

    Overlapping hits from different rules are kept.  Identical
    ``(rule_id, span)`` pairs are collapsed into one finding.

    Raises
    ------
    ScanInvariantError
        If a match names an unknown rule or an offset splits a character.
    """
    if not raw_matches:
        return []

    offsets = utf8_offsets(text)
    seen: set[tuple[str, int, int]] = set()
    findings: list[Finding] = []

    for raw in raw_matches:
        key = (raw.rule_id, raw.start, raw.end)
        if key in seen:
            continue
        seen.add(key)

        rule = rule_set.get(raw.rule_id)
        if rule is None:
            raise ScanInvariantError(f"match references unknown rule `{raw.rule_id}`")
        if raw.start > raw.end:
            raise ScanInvariantError(f"inverted span ({raw.start}, {raw.end}) for `{raw.rule_id}`")

        start_char = char_index(offsets, raw.start)
        end_char = char_index(offsets, raw.end)

        findings.append(
            Finding(
                rule_id=rule.id,
                span=(raw.start, raw.end),
                excerpt=extract_excerpt(text, start_char, end_char, rule.context_window),
                weight=rule.weight,
                family=rule.family,
            )
        )

    findings.sort(key=_ordering_key)
    logger.debug("Assembled %d findings from %d raw matches", len(findings), len(raw_matches))
    return findings
