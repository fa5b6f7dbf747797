"""
Value comparison for rule operands.

Date-like values (datetimes, ISO date strings, positive epoch-millisecond
numbers) are normalized to epoch milliseconds before comparing, so that a
datetime, "2023-01-15" and 1673740800000 all compare chronologically.
"""

from __future__ import annotations

import math
import operator
import re
from datetime import date, datetime, timezone
from typing import Any, Callable, Dict, Optional

from .paths import MISSING

# Largest time value representable by an ECMAScript Date (±100,000,000 days)
MAX_INSTANT_MS = 8.64e15

ISO_DATE_PATTERN = re.compile(
    r"^(\d{4})-(\d{2})-(\d{2})"
    r"(?:T(\d{2}):(\d{2}):(\d{2})(?:\.(\d{3}))?Z?)?$",
    re.ASCII,
)

ORDERING_RELATIONS: Dict[str, Callable[[Any, Any], bool]] = {
    ">": operator.gt,
    "<": operator.lt,
    ">=": operator.ge,
    "<=": operator.le,
}

EQUALITY_RELATIONS = ("===", "!==")

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _datetime_to_ms(value: datetime) -> float:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return (value - _EPOCH).total_seconds() * 1000


def _parse_iso(value: str) -> Optional[float]:
    """Parse an ISO date or date-time string to epoch milliseconds."""
    match = ISO_DATE_PATTERN.fullmatch(value)
    if not match:
        return None

    year, month, day, hour, minute, second, millis = match.groups()
    try:
        parsed = datetime(
            int(year), int(month), int(day),
            int(hour or 0), int(minute or 0), int(second or 0),
            int(millis or 0) * 1000,
            tzinfo=timezone.utc,
        )
    except ValueError:
        return None
    return _datetime_to_ms(parsed)


def to_instant(value: Any) -> Optional[float]:
    """
    Convert a date-like value to epoch milliseconds.

    Returns None when the value is not date-like.
    """
    if isinstance(value, datetime):
        return _datetime_to_ms(value)
    if isinstance(value, date):
        return _datetime_to_ms(datetime(value.year, value.month, value.day))
    if isinstance(value, str):
        return _parse_iso(value)
    if _is_number(value):
        if isinstance(value, float) and not math.isfinite(value):
            return None
        if 0 < value <= MAX_INSTANT_MS:
            return float(value)
    return None


def is_date_like(value: Any) -> bool:
    """Check whether a value can be read as a point in time."""
    return to_instant(value) is not None


def normalize_date(value: Any) -> Any:
    """Return epoch milliseconds for date-like values, the value otherwise."""
    instant = to_instant(value)
    return value if instant is None else instant


def strict_equals(left: Any, right: Any) -> bool:
    """
    Compare two values without cross-type coercion.

    Booleans only equal booleans, numbers only equal numbers, and None only
    equals None. Containers compare structurally.
    """
    if left is MISSING or right is MISSING:
        return left is right
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    if _is_number(left) or _is_number(right):
        return _is_number(left) and _is_number(right) and left == right
    if left is None or right is None:
        return left is right
    return left == right


def is_truthy(value: Any) -> bool:
    """
    Boolean coercion for rule operands.

    None, MISSING, False, zero, NaN and the empty string are falsy. Every
    other value is truthy, including empty lists and mappings.
    """
    if value is None or value is MISSING:
        return False
    if isinstance(value, bool):
        return value
    if _is_number(value):
        if isinstance(value, float):
            return value != 0 and not math.isnan(value)
        return value != 0
    if isinstance(value, str):
        return value != ""
    return True


def compare_values(left: Any, right: Any, relation: str) -> bool:
    """
    Compare two resolved operands.

    Args:
        left: Left operand.
        right: Right operand.
        relation: One of ``===``, ``!==``, ``>``, ``>=``, ``<``, ``<=``.

    Returns:
        The comparison result. Ordering two values of different kinds, or
        of a kind that has no order, yields False instead of raising.
    """
    left_instant = to_instant(left)
    right_instant = to_instant(right)

    if left_instant is not None and right_instant is not None:
        if relation == "===":
            return left_instant == right_instant
        if relation == "!==":
            return left_instant != right_instant
        compare = ORDERING_RELATIONS.get(relation)
        return compare(left_instant, right_instant) if compare else False

    if relation == "===":
        return strict_equals(left, right)
    if relation == "!==":
        return not strict_equals(left, right)

    compare = ORDERING_RELATIONS.get(relation)
    if compare is None:
        return False

    if _is_number(left) and _is_number(right):
        return compare(left, right)
    if isinstance(left, str) and isinstance(right, str):
        return compare(left, right)
    return False
