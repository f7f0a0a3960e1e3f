# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Structured verdict derived from a provider response."""

from __future__ import annotations

from pydantic import BaseModel

from promptwall.core.constants import VerdictLabel


class Verdict(BaseModel):
    """Secondary opinion on a scan.  ``unknown`` is a valid outcome, not an error."""

    label: VerdictLabel
    rationale: str
    mitigation: str
