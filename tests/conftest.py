# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Shared test fixtures and configuration."""

import json
import os
from pathlib import Path

import pytest

SAMPLE_RULES_DIR = Path(__file__).resolve().parent.parent / "rules"

KEYWORDS = """\
# test pack
INSTR_OVERRIDE|60|Override prior instructions|ignore previous instructions
SECRET_LEAK|50|Reveal the system prompt|reveal the system prompt
"""

PATTERNS = [
    {
        "id": "CODE_EXEC",
        "description": "Destructive shell command",
        "pattern": r"(?i)rm\s+-rf\s+/",
        "weight": 70,
        "window": 16,
    }
]


@pytest.fixture(autouse=True)
def _isolate_environment(tmp_path, monkeypatch):
    """Run every test from an empty directory with no PROMPTWALL_* variables."""
    for key in list(os.environ):
        if key.startswith("PROMPTWALL_"):
            monkeypatch.delenv(key, raising=False)
    workdir = tmp_path / "cwd"
    workdir.mkdir()
    monkeypatch.chdir(workdir)


@pytest.fixture
def sample_rules_dir() -> Path:
    return SAMPLE_RULES_DIR


@pytest.fixture
def rules_dir(tmp_path) -> Path:
    """A small rule pack with two keyword rules and one pattern rule."""
    path = tmp_path / "rules"
    path.mkdir()
    (path / "keywords.txt").write_text(KEYWORDS, encoding="utf-8")
    (path / "patterns.json").write_text(json.dumps(PATTERNS), encoding="utf-8")
    return path
