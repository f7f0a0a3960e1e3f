# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Two-pass text matcher: keyword automaton, then per-rule patterns."""

from __future__ import annotations

import logging

from promptwall.models.finding import RawMatch
from promptwall.rules.store import RuleSet
from promptwall.scanner.text import ascii_lower, byte_span, utf8_offsets

logger = logging.getLogger("promptwall.scanner.matcher")


def scan(text: str, rule_set: RuleSet) -> list[RawMatch]:
    """Return every raw match of *rule_set* in *text*.

    Keyword hits come first, in automaton order, followed by pattern hits in
    rule order.  Offsets are UTF-8 byte offsets.
    """
    if not text or not len(rule_set):
        return []

    offsets = utf8_offsets(text)
    matches = _keyword_pass(text, rule_set, offsets)
    matches.extend(_pattern_pass(text, rule_set, offsets))

    logger.debug("Matched %d raw hits over %d chars", len(matches), len(text))
    return matches


def _keyword_pass(text: str, rule_set: RuleSet, offsets: list[int]) -> list[RawMatch]:
    automaton = rule_set.automaton
    if automaton is None:
        return []

    matches: list[RawMatch] = []
    # iter() reports overlapping occurrences; end_index is inclusive.
    for end_index, (length, rule_ids) in automaton.iter(ascii_lower(text)):
        start, end = byte_span(offsets, end_index - length + 1, end_index + 1)
        matches.extend(RawMatch(rule_id, start, end) for rule_id in rule_ids)
    return matches


def _pattern_pass(text: str, rule_set: RuleSet, offsets: list[int]) -> list[RawMatch]:
    matches: list[RawMatch] = []
    for rule, compiled in rule_set.compiled_patterns:
        for match in compiled.finditer(text):
            if match.end() == match.start():
                continue
            start, end = byte_span(offsets, match.start(), match.end())
            matches.append(RawMatch(rule.id, start, end))
    return matches
