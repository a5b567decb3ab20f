from __future__ import annotations

from datetime import date, datetime
from typing import Any

"""Scalar value helpers shared by the filter engine, renderer and exporter.

Cell values arrive with the storage types pandas produced (str, int, float,
Timestamp, None). Filters compare the *display text* of a value, so the same
stringification is used everywhere a value is shown or matched.
"""

__all__ = [
    "PLACEHOLDER",
    "is_blank",
    "value_text",
    "display_value",
    "numeric_sort_key",
]

PLACEHOLDER = "—"

# 空扱いする文字列 (表示上は PLACEHOLDER)
_BLANK_STRINGS = {"", "null", "undefined"}


def is_blank(value: Any) -> bool:
    """True for values rendered as the placeholder (None, "", "null", "undefined")."""
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() in _BLANK_STRINGS
    return False


def value_text(value: Any) -> str:
    """Stringify a cell value for matching and display.

    - integral floats lose the trailing ".0" (Excel stores 5 as 5.0 in columns with gaps)
    - timestamps at midnight render as plain dates
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, datetime):
        if (value.hour, value.minute, value.second, value.microsecond) == (0, 0, 0, 0):
            return value.date().isoformat()
        return value.isoformat(sep=" ")
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def display_value(value: Any) -> str:
    """Display text with blanks replaced by the placeholder."""
    if is_blank(value):
        return PLACEHOLDER
    return value_text(value)


def numeric_sort_key(text: str) -> tuple[int, float, str]:
    """Sort numbers numerically first, then any non-numeric text alphabetically."""
    try:
        return (0, float(text), text)
    except ValueError:
        return (1, 0.0, text)
