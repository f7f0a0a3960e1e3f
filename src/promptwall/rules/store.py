# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Load, validate, and compile detection rules into an immutable RuleSet."""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Iterable, Iterator, Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Any

import ahocorasick
import yaml
from pydantic import BaseModel, ConfigDict, ValidationError

from promptwall.core.constants import KEYWORDS_FILE, PATTERN_FILES, RuleKind
from promptwall.core.exceptions import (
    DuplicateIdError,
    InvalidPatternError,
    RuleFormatError,
)
from promptwall.models.rule import Rule
from promptwall.scanner.text import ascii_lower

logger = logging.getLogger("promptwall.rules.store")


class RuleSet:
    """Validated, compiled and read-only collection of rules.

    Keyword rules are compiled into one Aho-Corasick automaton and pattern
    rules into regular expressions when the set is built, so a successfully
    constructed ``RuleSet`` can be shared across any number of scans.
    """

    __slots__ = ("_automaton", "_by_id", "_patterns", "_rules")

    def __init__(self, rules: Iterable[Rule] = ()) -> None:
        ordered = tuple(rules)
        by_id: dict[str, Rule] = {}
        for rule in ordered:
            if rule.id in by_id:
                raise DuplicateIdError(rule.id)
            by_id[rule.id] = rule

        self._rules = ordered
        self._by_id: Mapping[str, Rule] = MappingProxyType(by_id)
        self._patterns = tuple(
            (rule, _compile_pattern(rule)) for rule in ordered if rule.kind == RuleKind.PATTERN
        )
        self._automaton = _build_automaton(
            [rule for rule in ordered if rule.kind == RuleKind.KEYWORD]
        )

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self) -> Iterator[Rule]:
        return iter(self._rules)

    def __contains__(self, rule_id: object) -> bool:
        return rule_id in self._by_id

    def __repr__(self) -> str:
        return f"RuleSet(keywords={len(self.keyword_rules)}, patterns={len(self._patterns)})"

    def get(self, rule_id: str) -> Rule | None:
        return self._by_id.get(rule_id)

    @property
    def keyword_rules(self) -> list[Rule]:
        return [rule for rule in self._rules if rule.kind == RuleKind.KEYWORD]

    @property
    def pattern_rules(self) -> list[Rule]:
        return [rule for rule, _ in self._patterns]

    @property
    def automaton(self) -> Any | None:
        """Compiled keyword automaton, or ``None`` when there are no keyword rules.

        Each stored value is ``(keyword_length, rule_ids)``.
        """
        return self._automaton

    @property
    def compiled_patterns(self) -> tuple[tuple[Rule, re.Pattern[str]], ...]:
        return self._patterns


def _compile_pattern(rule: Rule) -> re.Pattern[str]:
    try:
        return re.compile(rule.pattern)
    except re.error as exc:
        raise InvalidPatternError(rule.id, str(exc)) from exc


def _build_automaton(rules: list[Rule]) -> Any | None:
    if not rules:
        return None

    automaton = ahocorasick.Automaton()
    for rule in rules:
        key = ascii_lower(rule.pattern)
        # Several rules may share one literal; all of them fire on a hit.
        _, existing = automaton.get(key, (len(key), ()))
        automaton.add_word(key, (len(key), (*existing, rule.id)))
    automaton.make_automaton()
    return automaton


# ---------------------------------------------------------------------------
# Source parsing
# ---------------------------------------------------------------------------


class PatternEntry(BaseModel):
    """Schema of one object in a pattern rule file."""

    model_config = ConfigDict(extra="ignore")

    id: str
    description: str = ""
    pattern: str
    weight: float
    window: int | None = None


def parse_keyword_lines(content: str, source: Path) -> list[Rule]:
    """Parse ``id|weight|description|pattern`` lines into keyword rules.

    Blank lines and lines starting with ``#`` are skipped.  The line is split
    into at most four fields so the pattern itself may contain ``|``.
    """
    rules: list[Rule] = []
    for lineno, line in enumerate(content.splitlines(), start=1):
        trimmed = line.strip()
        if not trimmed or trimmed.startswith("#"):
            continue

        parts = [part.strip() for part in trimmed.split("|", 3)]
        if len(parts) != 4:
            raise RuleFormatError(
                source, "expected id|weight|description|pattern", line=lineno
            )

        rule_id, raw_weight, description, pattern = parts
        try:
            weight = float(raw_weight)
        except ValueError as exc:
            raise RuleFormatError(
                source, f"invalid weight `{raw_weight}` for rule `{rule_id}`", line=lineno
            ) from exc

        rules.append(
            Rule(
                id=rule_id,
                description=description,
                kind=RuleKind.KEYWORD,
                pattern=pattern,
                weight=weight,
            )
        )
    return rules


def parse_pattern_entries(data: Any, source: Path) -> list[Rule]:
    """Validate a decoded pattern file (a list of objects) into pattern rules."""
    if data is None:
        return []
    if not isinstance(data, list):
        raise RuleFormatError(
            source, f"expected a list of rule objects, got {type(data).__name__}"
        )

    rules: list[Rule] = []
    for idx, item in enumerate(data):
        if not isinstance(item, dict):
            raise RuleFormatError(source, f"entry {idx} is not an object")
        try:
            entry = PatternEntry(**item)
        except ValidationError as exc:
            raise RuleFormatError(source, f"entry {idx}: {exc}") from exc

        rules.append(
            Rule(
                id=entry.id,
                description=entry.description,
                kind=RuleKind.PATTERN,
                pattern=entry.pattern,
                weight=entry.weight,
                window=entry.window,
            )
        )
    return rules


def load_keyword_file(path: Path) -> list[Rule]:
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise RuleFormatError(path, f"failed to read keyword rule file: {exc}") from exc
    return parse_keyword_lines(content, path)


def load_pattern_file(path: Path) -> list[Rule]:
    """Load a pattern file; ``.yaml``/``.yml`` use YAML, anything else JSON."""
    try:
        raw = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise RuleFormatError(path, f"failed to read pattern rule file: {exc}") from exc

    try:
        if path.suffix.lower() in (".yaml", ".yml"):
            data = yaml.safe_load(raw)
        else:
            data = json.loads(raw)
    except (ValueError, yaml.YAMLError) as exc:
        raise RuleFormatError(path, f"invalid structure in pattern rule file: {exc}") from exc

    return parse_pattern_entries(data, path)


def load_rule_set(sources: Iterable[str | Path]) -> RuleSet:
    """Load every source file, in order, into one validated :class:`RuleSet`.

    ``.txt`` files are read as keyword files; everything else as pattern
    files.  Duplicate ids are rejected across all sources.

    Raises
    ------
    RuleError
        On the first malformed source, invalid rule or duplicate id.
    """
    rules: list[Rule] = []
    seen: set[str] = set()
    for source in sources:
        path = Path(source)
        loaded = load_keyword_file(path) if path.suffix.lower() == ".txt" else load_pattern_file(path)
        for rule in loaded:
            if rule.id in seen:
                raise DuplicateIdError(rule.id)
            seen.add(rule.id)
        rules.extend(loaded)
        logger.debug("Loaded %d rules from %s", len(loaded), path)

    rule_set = RuleSet(rules)
    logger.info("Rule set ready: %r", rule_set)
    return rule_set


def load_rules_dir(rules_dir: str | Path) -> RuleSet:
    """Load ``keywords.txt`` and the pattern file(s) found in *rules_dir*.

    Missing files contribute no rules.
    """
    rules_path = Path(rules_dir)
    if not rules_path.is_dir():
        logger.warning("Rules directory does not exist: %s", rules_path)
        return RuleSet()

    candidates = [rules_path / KEYWORDS_FILE, *(rules_path / name for name in PATTERN_FILES)]
    return load_rule_set(path for path in candidates if path.is_file())
