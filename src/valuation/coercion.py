"""Lenient numeric parsing at the request boundary.

Valuation must always complete, so malformed numbers never raise here: they
collapse to a documented default instead.
"""

from __future__ import annotations

import math
import re
from typing import Any

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")
# Plain decimal or exponent notation only; no digit-group underscores.
_DECIMAL = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")


def parse_int_with_default(raw: Any, default: int = 0) -> int:
    """Parse a base-10 integer from the leading digits of ``raw``.

    ``"45000 km"`` gives 45000, ``"abc"`` or ``None`` gives ``default``.
    Floats are truncated toward zero.
    """
    if raw is None or isinstance(raw, bool):
        return default
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        if not math.isfinite(raw):
            return default
        return int(raw)
    match = _LEADING_INT.match(str(raw))
    if match is None:
        return default
    return int(match.group(1)) or default


def parse_price_with_default(raw: Any, default: float) -> float:
    """Parse a price; empty, zero, non-numeric or non-finite input gives ``default``."""
    if raw is None or isinstance(raw, bool):
        return default
    if isinstance(raw, str):
        raw = raw.strip()
        if not _DECIMAL.match(raw):
            return default
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(value) or value == 0:
        return default
    return int(value) if value.is_integer() else value


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves toward positive infinity."""
    return math.floor(value + 0.5)
