"""Numeric-aware ("natural") ordering for machine names and bucket keys."""

from __future__ import annotations

import re
from typing import TypeAlias

_DIGITS = re.compile(r"(\d+)")

NaturalKey: TypeAlias = tuple[tuple[str | int, ...], str]


def natural_key(value: str | None) -> NaturalKey:
    """Sort key where digit runs compare by value and text compares case-insensitively.

    ``"game2" < "game10"``. Ties between equal-valued spellings (``"01"`` vs ``"1"``)
    fall back to the plain lowercase string so ordering stays total.
    """

    text = (value or "").lower()
    parts = _DIGITS.split(text)
    # split() alternates text/digits, so equal positions always hold equal types
    chunks = tuple(int(part) if index % 2 else part for index, part in enumerate(parts))
    return chunks, text
