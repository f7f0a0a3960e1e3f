# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""promptwall - Text-risk firewall for prompt-injection and manipulation indicators."""

__version__ = "0.1.0"

from promptwall.models.report import ScanReport
from promptwall.rules.store import RuleSet, load_rule_set, load_rules_dir
from promptwall.scanner.pipeline import TextScanner, enrich_report

__all__ = [
    "RuleSet",
    "ScanReport",
    "TextScanner",
    "__version__",
    "enrich_report",
    "load_rule_set",
    "load_rules_dir",
]
