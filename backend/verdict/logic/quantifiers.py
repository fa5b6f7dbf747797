"""
Array quantifiers.

ANY, ALL and NONE resolve an array from the context and evaluate a child
condition once per element, with the element as the whole context:

    any_("user.roles", eq("name", "admin"))
    all_("scores", gte(SELF, 50))

A path that does not lead to an array means no element can match.
"""

from __future__ import annotations

import logging
from abc import abstractmethod
from typing import Any, ClassVar, Dict, Iterable, Iterator, Sequence, Tuple

from .operators import Operator
from .paths import MISSING, is_array, resolve_path

logger = logging.getLogger(__name__)


class Quantifier(Operator):
    """Base class for array quantifiers."""

    # Result when the path does not resolve to an array
    missing_result: ClassVar[bool] = False

    __slots__ = ("_array_path", "_condition")

    def __init__(self, array_path: str, condition: Operator):
        if not isinstance(array_path, str):
            raise TypeError(
                f"{type(self).__name__} expects a path string, got {type(array_path).__name__}"
            )
        if not isinstance(condition, Operator):
            raise TypeError(
                f"{type(self).__name__} expects an Operator condition, got {type(condition).__name__}"
            )
        self._array_path = array_path
        self._condition = condition

    @property
    def array_path(self) -> str:
        return self._array_path

    @property
    def condition(self) -> Operator:
        return self._condition

    def evaluate(self, context: Any = None) -> bool:
        items = resolve_path(context, self._array_path) if context is not None else MISSING
        if not is_array(items):
            return self.missing_result
        return self._decide(self._results(items))

    def _results(self, items: Sequence[Any]) -> Iterator[bool]:
        """Lazily evaluate the condition with each element as the context."""
        for index, element in enumerate(items):
            try:
                yield self._condition.evaluate(element)
            except Exception as e:
                logger.debug(
                    "Condition %r raised on element %d of %r, treating as unmatched: %s",
                    self._condition.name, index, self._array_path, e,
                )
                yield False

    @abstractmethod
    def _decide(self, results: Iterable[bool]) -> bool:
        """Reduce per-element results to the quantifier outcome."""

    def to_canonical_form(self) -> Dict[str, Any]:
        return self._document([self._array_path, self._condition.to_canonical_form()])

    def _key(self) -> Tuple[Any, ...]:
        return (self._array_path, self._condition)


class AnyOf(Quantifier):
    """True when at least one element satisfies the condition."""

    name = "any"
    __slots__ = ()

    def _decide(self, results: Iterable[bool]) -> bool:
        return any(results)


class AllOf(Quantifier):
    """True when every element satisfies the condition. Empty arrays pass."""

    name = "all"
    __slots__ = ()

    def _decide(self, results: Iterable[bool]) -> bool:
        return all(results)


class NoneOf(Quantifier):
    """True when no element satisfies the condition."""

    name = "none"
    missing_result = True
    __slots__ = ()

    def _decide(self, results: Iterable[bool]) -> bool:
        return not any(results)


def any_(array_path: str, condition: Operator) -> AnyOf:
    return AnyOf(array_path, condition)


def all_(array_path: str, condition: Operator) -> AllOf:
    return AllOf(array_path, condition)


def none(array_path: str, condition: Operator) -> NoneOf:
    return NoneOf(array_path, condition)
