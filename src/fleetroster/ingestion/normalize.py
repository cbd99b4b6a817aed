"""Normalization helpers.

Centralizes defensive parsing and placeholder handling for raw store records.
"""

from __future__ import annotations

import math
import re
from typing import Any

from fleetroster._constants import NOT_AVAILABLE

# Cell values the record stores use for "no value". Compared exactly after
# stripping: real names such as "Na" or "None" must survive.
_PLACEHOLDERS = frozenset({"", "--", NOT_AVAILABLE})

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def is_placeholder(value: Any) -> bool:
    """Return True if *value* carries no information."""
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    if isinstance(value, str):
        return value.strip() in _PLACEHOLDERS
    return False


def clean_text(value: Any) -> str | None:
    """Strip a raw value to text, or None when it is a placeholder."""
    if is_placeholder(value):
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


def leading_int(value: Any) -> int | None:
    """Parse the leading integer of a value (``"45 seats"`` -> 45).

    Mirrors how spreadsheet-entered numbers are read by the stores' clients.
    """
    if isinstance(value, bool) or is_placeholder(value):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    match = _LEADING_INT.match(str(value))
    if match is None:
        return None
    return int(match.group(1))


def positive_int_or_none(value: Any) -> int | None:
    parsed = leading_int(value)
    if parsed is None or parsed <= 0:
        return None
    return parsed
