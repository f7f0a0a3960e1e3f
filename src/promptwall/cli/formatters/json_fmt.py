# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""JSON output formatter."""

from __future__ import annotations

import json
from collections.abc import Iterable

from promptwall.models.report import ScanReport
from promptwall.models.rule import Rule


def format_json(report: ScanReport) -> str:
    """Return the report as a formatted JSON string."""
    return report.model_dump_json(indent=2)


def format_rules_json(rules: Iterable[Rule]) -> str:
    return json.dumps([rule.model_dump(mode="json") for rule in rules], indent=2)
