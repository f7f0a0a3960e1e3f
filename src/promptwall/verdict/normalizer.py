# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Coerce free-text provider responses into a structured Verdict.

Parsing is attempted in layers, each tried only when the previous one fails:

1. strict JSON on the raw text
2. strip markdown code fences (and any prose before the first ``{``), strict JSON
3. heuristic repair (newlines inside strings, unterminated string, unclosed
   brackets), strict JSON
4. lenient JSON5 parse of the repaired text
5. synthetic ``unknown`` verdict

:func:`normalize` never raises for malformed input.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any

import json5

from promptwall.core.constants import MAX_RATIONALE_WORDS, VerdictLabel
from promptwall.core.logging import redact_sensitive
from promptwall.models.verdict import Verdict

logger = logging.getLogger("promptwall.verdict.normalizer")

UNPARSABLE_RATIONALE = "provider returned an unparsable or empty response"
UNVERIFIED_MITIGATION = "treat as unverified; rely on heuristic score"

_MISSING_RATIONALE = "provider gave no rationale"
_MISSING_MITIGATION = "review the flagged content before use."

_JSON_FENCE_RE = re.compile(r"```(?:json5?|JSON)?\s*\n?(.*?)\n?```", re.DOTALL)
# An opening fence whose closing fence was cut off.
_OPEN_FENCE_RE = re.compile(r"^```(?:json5?|JSON)?\s*\n?", re.DOTALL)
_FIRST_SENTENCE_RE = re.compile(r"^(.+?[.!?])(?=\s|$)")

_CLOSERS = {"{": "}", "[": "]"}


# ---------------------------------------------------------------------------
# Parsing layers
# ---------------------------------------------------------------------------


def _parse_strict(text: str) -> Any | None:
    try:
        return json.loads(text)
    except (ValueError, RecursionError):
        return None


def _parse_lenient(text: str) -> Any | None:
    try:
        return json5.loads(text)
    except Exception:  # json5 reports malformed input with assorted exception types
        return None


def strip_fences(text: str) -> str:
    """Remove markdown code fences and any leading prose before the JSON object."""
    stripped = text.strip()

    fence_match = _JSON_FENCE_RE.search(stripped)
    if fence_match:
        stripped = fence_match.group(1).strip()
    else:
        stripped = _OPEN_FENCE_RE.sub("", stripped, count=1).strip()

    if not stripped.startswith("{"):
        start = stripped.find("{")
        if start != -1:
            stripped = stripped[start:]
    return stripped


def repair_json(text: str) -> str | None:
    """Best-effort repair of truncated or newline-mangled JSON.

    Raw newlines inside string values become spaces; an unterminated trailing
    string is closed; unclosed objects and arrays are closed in order.
    Returns ``None`` when a closing bracket does not match its opener, since
    that is not a truncation and cannot be repaired safely.
    """
    out: list[str] = []
    stack: list[str] = []
    in_string = False
    escaped = False

    for char in text:
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            elif char in "\r\n":
                char = " "
            out.append(char)
            continue

        if char == '"':
            in_string = True
        elif char in _CLOSERS:
            stack.append(_CLOSERS[char])
        elif char in "}]":
            if not stack or stack.pop() != char:
                return None
        out.append(char)

    if in_string:
        if escaped:
            out.pop()
        out.append('"')
    while stack:
        out.append(stack.pop())
    return "".join(out)


# ---------------------------------------------------------------------------
# Field coercion
# ---------------------------------------------------------------------------


def _clean_text(value: Any) -> str:
    if not isinstance(value, str):
        return ""
    return " ".join(value.split())


def cap_words(text: str, limit: int = MAX_RATIONALE_WORDS) -> str:
    words = text.split()
    return " ".join(words[:limit])


def first_sentence(text: str) -> str:
    match = _FIRST_SENTENCE_RE.match(text)
    return match.group(1) if match else text


def _coerce_label(raw: str) -> VerdictLabel:
    try:
        return VerdictLabel(raw.strip().lower())
    except ValueError:
        logger.warning("Unrecognised verdict label %r, mapping to unknown", raw)
        return VerdictLabel.UNKNOWN


def _to_verdict(data: Any) -> Verdict | None:
    if not isinstance(data, dict):
        return None
    label = data.get("label")
    if not isinstance(label, str) or not label.strip():
        return None

    rationale = cap_words(_clean_text(data.get("rationale"))) or _MISSING_RATIONALE
    mitigation = first_sentence(_clean_text(data.get("mitigation"))) or _MISSING_MITIGATION
    return Verdict(label=_coerce_label(label), rationale=rationale, mitigation=mitigation)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def unknown_verdict(rationale: str = UNPARSABLE_RATIONALE) -> Verdict:
    return Verdict(
        label=VerdictLabel.UNKNOWN,
        rationale=rationale,
        mitigation=UNVERIFIED_MITIGATION,
    )


def failure_verdict(reason: str) -> Verdict:
    """Unknown verdict for a provider call that never produced text."""
    detail = cap_words(redact_sensitive(_clean_text(reason)), MAX_RATIONALE_WORDS - 3)
    rationale = f"provider call failed: {detail}" if detail else "provider call failed"
    return unknown_verdict(rationale)


def normalize(raw_response_text: str) -> Verdict:
    """Turn raw provider output into a :class:`Verdict`, never raising."""
    if not raw_response_text or not raw_response_text.strip():
        logger.info("Empty provider response, returning unknown verdict")
        return unknown_verdict()

    data = _parse_strict(raw_response_text)
    layer = "strict"

    if data is None:
        stripped = strip_fences(raw_response_text)
        data = _parse_strict(stripped)
        layer = "fence"

        if data is None:
            repaired = repair_json(stripped)
            if repaired is not None:
                data = _parse_strict(repaired)
                layer = "repair"
            if data is None:
                data = _parse_lenient(repaired if repaired is not None else stripped)
                layer = "lenient"

    verdict = _to_verdict(data)
    if verdict is None:
        logger.info("Provider response could not be normalized, returning unknown verdict")
        return unknown_verdict()

    logger.debug("Normalized provider response via %s parse: %s", layer, verdict.label)
    return verdict
