# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Text helpers shared by rule compilation, matching and excerpting."""

from __future__ import annotations

import string
from bisect import bisect_left

from promptwall.core.exceptions import ScanInvariantError

_ASCII_LOWER = str.maketrans(string.ascii_uppercase, string.ascii_lowercase)


def ascii_lower(text: str) -> str:
    """Lowercase ASCII letters only; character positions are unchanged."""
    return text.translate(_ASCII_LOWER)


def utf8_offsets(text: str) -> list[int]:
    """Return the UTF-8 byte offset of every character boundary in *text*.

    ``offsets[i]`` is the byte offset of character ``i``; the final entry is
    the encoded length.  Lone surrogates are counted as their three-byte
    ``surrogatepass`` encoding.
    """
    offsets = [0]
    total = 0
    for char in text:
        code = ord(char)
        if code < 0x80:
            total += 1
        elif code < 0x800:
            total += 2
        elif code < 0x10000:
            total += 3
        else:
            total += 4
        offsets.append(total)
    return offsets


def byte_span(offsets: list[int], start: int, end: int) -> tuple[int, int]:
    """Convert a character span to a byte span."""
    if not 0 <= start <= end < len(offsets):
        raise ScanInvariantError(
            f"character span ({start}, {end}) outside text of {len(offsets) - 1} chars"
        )
    return offsets[start], offsets[end]


def char_index(offsets: list[int], byte_offset: int) -> int:
    """Convert a byte offset back to a character index.

    Raises :class:`ScanInvariantError` when the offset does not fall on a
    character boundary.
    """
    idx = bisect_left(offsets, byte_offset)
    if idx >= len(offsets) or offsets[idx] != byte_offset:
        raise ScanInvariantError(f"byte offset {byte_offset} splits a multi-byte character")
    return idx
