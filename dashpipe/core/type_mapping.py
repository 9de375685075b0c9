"""Shared value coercion utilities.

Transforms compare and aggregate loosely typed cell values (CSV text, JSON
numbers, booleans, nulls). These helpers give every stage the same rules:

- ``to_number`` is a best-effort numeric cast: booleans become 1/0, ``None``
  and blank strings become 0, numeric strings (decimal, 0x/0o/0b integers,
  Infinity) are parsed, anything else is NaN.
- ``to_text`` is the text form used for substring matching and group keys.
- ``strict_equals`` requires both sides to be the same kind of scalar.
- ``compare`` orders two values without ever raising.
"""

import math
import re
from typing import Any


class _Missing:
    """Marker for a key that is absent from a row (as opposed to a null value)."""

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()

NUMERIC_LITERAL = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")
# Unsigned only: "-0x1A" is not a number
PREFIXED_INTEGER = re.compile(r"^0([xX][0-9a-fA-F]+|[oO][0-7]+|[bB][01]+)$")
INFINITY_LITERAL = re.compile(r"^([+-]?)Infinity$")

MAX_SAFE_INTEGER = 2**53


def is_number(value: Any) -> bool:
    """True for int/float values that are not booleans."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_numeric_literal(text: str) -> bool:
    """True if ``text`` is, in full, a decimal numeric literal."""
    return bool(NUMERIC_LITERAL.match(text.strip()))


def to_number(value: Any) -> float:
    """Coerce a cell value to a number, returning NaN when it has none."""
    if value is MISSING:
        return math.nan
    if value is None:
        return 0.0
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if is_number(value):
        return float(value)
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            return 0.0
        if is_numeric_literal(stripped):
            return float(stripped)
        if PREFIXED_INTEGER.match(stripped):
            return float(int(stripped, 0))
        infinity = INFINITY_LITERAL.match(stripped)
        if infinity:
            return -math.inf if infinity.group(1) == "-" else math.inf
    return math.nan


def normalize_number(value: float) -> int | float:
    """Return integral floats as ints so they serialize without a trailing .0."""
    if isinstance(value, float) and value.is_integer() and abs(value) < MAX_SAFE_INTEGER:
        return int(value)
    return value


def to_text(value: Any) -> str:
    """Text form of a cell value."""
    if value is MISSING:
        return "undefined"
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return str(normalize_number(value))
    return str(value)


def _kind(value: Any) -> str:
    if value is MISSING:
        return "missing"
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "bool"
    if is_number(value):
        return "number"
    if isinstance(value, str):
        return "string"
    return type(value).__name__


def strict_equals(left: Any, right: Any) -> bool:
    """Equality that never crosses scalar kinds ("1" != 1, True != 1)."""
    if _kind(left) != _kind(right):
        return False
    if left is MISSING:
        return True
    return bool(left == right)


def compare(left: Any, right: Any) -> int:
    """Three-way comparison of two cell values.

    Two strings compare lexicographically. Any other pair is compared
    numerically after ``to_number``; if either side is NaN the pair ties.
    """
    if isinstance(left, str) and isinstance(right, str):
        return (left > right) - (left < right)
    a = to_number(left)
    b = to_number(right)
    if math.isnan(a) or math.isnan(b):
        return 0
    return (a > b) - (a < b)
