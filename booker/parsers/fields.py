"""
Field coercion for untrusted record input.

Every ingestion boundary (form input on add, imported JSON, stored JSON
on load) runs raw values through these helpers, so a record never holds
NaN, infinity, or a numeric field stored as text.
"""

import json
import math
from typing import Any

# Integral floats inside this range are held as int ("5", 5.0 -> 5)
_MAX_EXACT_INT = 2**53


def _normalize(value: float) -> int | float | None:
    if not math.isfinite(value):
        return None
    if value.is_integer() and abs(value) < _MAX_EXACT_INT:
        return int(value)
    return value


def parse_finite_number(value: Any) -> int | float | None:
    """
    Parse an optional finite number.

    Accepts ints, floats, booleans (as 0/1), and numeric text with
    surrounding whitespace. Blank text, non-numeric text, NaN, infinities
    and any other type yield None.

    Examples:
        >>> parse_finite_number(" 12 ")
        12
        >>> parse_finite_number("1.5")
        1.5
        >>> parse_finite_number("abc") is None
        True
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return _normalize(value)
    if isinstance(value, str):
        text = value.strip()
        # float() accepts digit separators, JSON-style input does not
        if not text or "_" in text:
            return None
        try:
            return _normalize(float(text))
        except ValueError:
            return None
    return None


def format_number(value: int | float | None) -> str:
    """Render an optional number for display and search, absent as ''."""
    if value is None:
        return ""
    return str(value)


def coerce_text(value: Any) -> str:
    """
    Coerce an arbitrary JSON value to trimmed text.

    None becomes "", booleans render as "true"/"false", numbers render
    without a trailing ".0", and nested arrays/objects render as compact JSON.
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int | float):
        return format_number(parse_finite_number(value)) or str(value)
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)
