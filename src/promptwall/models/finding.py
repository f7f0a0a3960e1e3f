# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Raw match and finding models."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, Field

Span = tuple[int, int]


@dataclass(frozen=True, slots=True)
class RawMatch:
    """A rule hit as UTF-8 byte offsets ``[start, end)``; lives for one scan."""

    rule_id: str
    start: int
    end: int


class Finding(BaseModel):
    """A rule tied to a location in the scanned text."""

    rule_id: str
    span: Span = Field(description="UTF-8 byte offsets (start, end) into the scanned text")
    excerpt: str = Field(description="Redacted context around the match, at most 240 chars")
    weight: float = Field(ge=0.0, le=100.0)
    family: str
