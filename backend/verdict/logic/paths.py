"""
Context path resolution.

Resolves dotted paths such as ``user.profile.name`` or ``users.0.id``
against nested mappings and sequences. A ``*`` segment applies the rest of
the path to every element of an array:

    >>> data = {"users": [{"name": "Alice"}, {"name": "Bob"}]}
    >>> resolve_path(data, "users.*.name")
    ['Alice', 'Bob']
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, List

WILDCARD = "*"
SEPARATOR = "."


class _Missing:
    """Marker for a path that does not exist in the context."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISSING"

    def __reduce__(self):
        return "MISSING"


MISSING = _Missing()


def is_array(value: Any) -> bool:
    """Return True for list-like values. Strings are never arrays."""
    return isinstance(value, (list, tuple))


def _step(current: Any, segment: str) -> Any:
    """Descend one segment, or return MISSING."""
    if current is None or current is MISSING:
        return MISSING

    if isinstance(current, Mapping):
        if segment in current:
            return current[segment]
        return MISSING

    if is_array(current):
        # Only canonical indices address elements: "1" but not "01" or "-1"
        if segment.isascii() and segment.isdigit() and (segment == "0" or not segment.startswith("0")):
            index = int(segment)
            if index < len(current):
                return current[index]
        return MISSING

    return MISSING


def _resolve_simple(obj: Any, parts: List[str]) -> Any:
    current = obj
    for part in parts:
        current = _step(current, part)
        if current is MISSING:
            return MISSING
    return current


def _resolve_wildcard(obj: Any, parts: List[str]) -> Any:
    current = obj

    for i, part in enumerate(parts):
        if current is None or current is MISSING:
            return MISSING

        if part != WILDCARD:
            current = _step(current, part)
            continue

        if not is_array(current):
            return MISSING

        remaining = parts[i + 1:]
        if not remaining:
            return current

        results = [
            _resolve_wildcard(item, remaining)
            if WILDCARD in remaining
            else _resolve_simple(item, remaining)
            for item in current
        ]

        if any(is_array(result) for result in results):
            flattened: List[Any] = []
            for result in results:
                if is_array(result):
                    flattened.extend(r for r in result if r is not MISSING)
                elif result is not MISSING:
                    flattened.append(result)
            return flattened

        return [result for result in results if result is not MISSING]

    return current


def resolve_path(obj: Any, path: str) -> Any:
    """
    Resolve a dotted path against a value.

    Args:
        obj: The value to traverse (usually the evaluation context).
        path: Dot-separated segments. Numeric segments index arrays and
            ``*`` expands over every element of an array.

    Returns:
        The resolved value, a list of values for wildcard paths, or
        MISSING when any segment cannot be followed. Out-of-range indices
        and absent keys are both reported as MISSING.
    """
    parts = path.split(SEPARATOR)
    if WILDCARD in parts:
        return _resolve_wildcard(obj, parts)
    return _resolve_simple(obj, parts)


def get_value(obj: Any, path: str, default: Any = None) -> Any:
    """Resolve a path, returning ``default`` when it is missing."""
    value = resolve_path(obj, path)
    return default if value is MISSING else value
