# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Tests for rule loading, validation and RuleSet compilation."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from promptwall.core.constants import RuleKind
from promptwall.core.exceptions import (
    DuplicateIdError,
    EmptyPatternError,
    InvalidPatternError,
    InvalidWindowError,
    RuleError,
    RuleFormatError,
    WeightOutOfRangeError,
)
from promptwall.models.rule import Rule
from promptwall.rules.store import (
    RuleSet,
    load_rule_set,
    load_rules_dir,
    parse_keyword_lines,
    parse_pattern_entries,
)

_SOURCE = Path("keywords.txt")


def _write(path: Path, content: str) -> Path:
    path.write_text(content, encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# Keyword file parsing
# ---------------------------------------------------------------------------


class TestKeywordLines:
    def test_parses_fields_and_skips_comments(self) -> None:
        content = "# header\n\n  INSTR_A | 30 | Override | ignore previous  \n"
        rules = parse_keyword_lines(content, _SOURCE)

        assert len(rules) == 1
        rule = rules[0]
        assert rule.id == "INSTR_A"
        assert rule.weight == 30.0
        assert rule.description == "Override"
        assert rule.pattern == "ignore previous"
        assert rule.kind == RuleKind.KEYWORD
        assert rule.family == "INSTR"

    def test_pattern_may_contain_pipes(self) -> None:
        rules = parse_keyword_lines("PIPE_X|10|desc|a | b", _SOURCE)
        assert rules[0].pattern == "a | b"

    def test_missing_field_reports_line(self) -> None:
        with pytest.raises(RuleFormatError) as exc_info:
            parse_keyword_lines("# c\nONLY|10|two-fields", _SOURCE)
        assert exc_info.value.line == 2

    def test_non_numeric_weight(self) -> None:
        with pytest.raises(RuleFormatError, match="invalid weight"):
            parse_keyword_lines("BAD_W|heavy|desc|pattern", _SOURCE)

    def test_weight_out_of_range(self) -> None:
        with pytest.raises(WeightOutOfRangeError):
            parse_keyword_lines("BIG_W|101|desc|pattern", _SOURCE)

    def test_empty_pattern(self) -> None:
        with pytest.raises(EmptyPatternError):
            parse_keyword_lines("EMPTY_P|10|desc|   ", _SOURCE)


# ---------------------------------------------------------------------------
# Pattern file parsing
# ---------------------------------------------------------------------------


class TestPatternEntries:
    def test_parses_optional_window(self) -> None:
        rules = parse_pattern_entries(
            [
                {"id": "P_ONE", "description": "d", "pattern": "a+", "weight": 5},
                {"id": "P_TWO", "description": "d", "pattern": "b+", "weight": 6, "window": 8},
            ],
            Path("patterns.json"),
        )
        assert [r.window for r in rules] == [None, 8]
        assert all(r.kind == RuleKind.PATTERN for r in rules)

    def test_rejects_non_list(self) -> None:
        with pytest.raises(RuleFormatError):
            parse_pattern_entries({"id": "x"}, Path("patterns.json"))

    def test_rejects_missing_fields(self) -> None:
        with pytest.raises(RuleFormatError):
            parse_pattern_entries([{"id": "NO_PATTERN", "weight": 1}], Path("patterns.json"))

    def test_invalid_window(self) -> None:
        with pytest.raises(InvalidWindowError):
            parse_pattern_entries(
                [{"id": "W", "pattern": "x", "weight": 1, "window": 0}], Path("patterns.json")
            )


# ---------------------------------------------------------------------------
# RuleSet
# ---------------------------------------------------------------------------


class TestRuleSet:
    def test_duplicate_ids_rejected(self) -> None:
        rule = Rule(id="DUP_A", kind=RuleKind.KEYWORD, pattern="x", weight=1)
        with pytest.raises(DuplicateIdError) as exc_info:
            RuleSet([rule, rule])
        assert exc_info.value.rule_id == "DUP_A"

    def test_invalid_regex_rejected(self) -> None:
        rule = Rule(id="BROKEN_RE", kind=RuleKind.PATTERN, pattern="(unclosed", weight=1)
        with pytest.raises(InvalidPatternError) as exc_info:
            RuleSet([rule])
        assert exc_info.value.rule_id == "BROKEN_RE"

    def test_lookup_and_iteration(self) -> None:
        keyword = Rule(id="K_ONE", kind=RuleKind.KEYWORD, pattern="abc", weight=1)
        pattern = Rule(id="P_ONE", kind=RuleKind.PATTERN, pattern="a+", weight=2)
        rule_set = RuleSet([keyword, pattern])

        assert len(rule_set) == 2
        assert list(rule_set) == [keyword, pattern]
        assert rule_set.get("P_ONE") is pattern
        assert rule_set.get("missing") is None
        assert "K_ONE" in rule_set
        assert rule_set.keyword_rules == [keyword]
        assert rule_set.pattern_rules == [pattern]

    def test_empty_set_has_no_automaton(self) -> None:
        rule_set = RuleSet()
        assert len(rule_set) == 0
        assert rule_set.automaton is None
        assert rule_set.compiled_patterns == ()


# ---------------------------------------------------------------------------
# File and directory loading
# ---------------------------------------------------------------------------


class TestLoadRuleSet:
    def test_counts_all_valid_entries(self, tmp_path) -> None:
        keywords = _write(
            tmp_path / "keywords.txt",
            "\n".join(f"KW_{i}|{i}|desc|word{i}" for i in range(7)),
        )
        patterns = _write(
            tmp_path / "patterns.json",
            json.dumps([{"id": f"PT_{i}", "pattern": f"x{{{i + 1}}}", "weight": i} for i in range(5)]),
        )
        assert len(load_rule_set([keywords, patterns])) == 12

    def test_duplicate_across_files(self, tmp_path) -> None:
        keywords = _write(tmp_path / "keywords.txt", "SAME_ID|10|d|word")
        patterns = _write(
            tmp_path / "patterns.json",
            json.dumps([{"id": "SAME_ID", "pattern": "x", "weight": 1}]),
        )
        with pytest.raises(DuplicateIdError):
            load_rule_set([keywords, patterns])

    def test_yaml_pattern_file(self, tmp_path) -> None:
        patterns = _write(
            tmp_path / "patterns.yaml",
            "- id: YAML_ONE\n  description: from yaml\n  pattern: 'ab+c'\n  weight: 12\n  window: 4\n",
        )
        rule_set = load_rule_set([patterns])
        rule = rule_set.get("YAML_ONE")
        assert rule is not None
        assert rule.window == 4

    def test_malformed_json(self, tmp_path) -> None:
        patterns = _write(tmp_path / "patterns.json", "[{not json")
        with pytest.raises(RuleFormatError):
            load_rule_set([patterns])

    def test_errors_share_base_class(self, tmp_path) -> None:
        keywords = _write(tmp_path / "keywords.txt", "X|abc|d|p")
        with pytest.raises(RuleError):
            load_rule_set([keywords])


class TestLoadRulesDir:
    def test_loads_both_files(self, rules_dir) -> None:
        rule_set = load_rules_dir(rules_dir)
        assert {rule.id for rule in rule_set} == {"INSTR_OVERRIDE", "SECRET_LEAK", "CODE_EXEC"}

    def test_missing_files_contribute_nothing(self, tmp_path) -> None:
        (tmp_path / "only_keywords").mkdir()
        _write(tmp_path / "only_keywords" / "keywords.txt", "K_A|1|d|alpha")
        assert len(load_rules_dir(tmp_path / "only_keywords")) == 1

    def test_missing_directory_is_empty(self, tmp_path) -> None:
        assert len(load_rules_dir(tmp_path / "nope")) == 0

    def test_sample_pack_loads(self, sample_rules_dir) -> None:
        rule_set = load_rules_dir(sample_rules_dir)
        assert len(rule_set) > 0
        assert rule_set.get("INSTR_OVERRIDE") is not None
