"""
Operator tree.

Rules are trees of Operator nodes. Leaves compare operands, inner nodes
combine child results:

    rule = and_(eq("user.status", "active"), gt("user.age", 18))
    rule.evaluate({"user": {"status": "active", "age": 25}})  # True

Operands are classified once, when a node is built:
- Operator instances are evaluated against the same context;
- SELF stands for the context itself;
- strings are paths into the context, falling back to the string itself
  when the path does not exist;
- anything else is a literal.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Dict, List, Optional, Tuple

from .compare import compare_values, is_truthy, strict_equals
from .paths import MISSING, is_array, resolve_path

SELF_TOKEN = "#$self$#"


class SelfReference:
    """
    Operand that resolves to the evaluation context itself.

    Mostly useful inside array quantifiers over primitive arrays, where each
    element becomes the context: ``any_("tags", eq(SELF, "vip"))``.
    """

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "SELF"

    def __reduce__(self):
        return "SELF"


SELF = SelfReference()


class OperandKind(str, Enum):
    """Operand variants."""
    LITERAL = "literal"
    PATH = "path"
    NODE = "node"
    SELF = "self"


@dataclass(frozen=True)
class Operand:
    """A classified operator argument."""

    kind: OperandKind
    value: Any

    @classmethod
    def of(cls, value: Any) -> "Operand":
        """Classify a raw argument."""
        if isinstance(value, Operand):
            return value
        if isinstance(value, Operator):
            return cls(OperandKind.NODE, value)
        if value is SELF:
            return cls(OperandKind.SELF, value)
        if isinstance(value, str):
            return cls(OperandKind.PATH, value)
        return cls(OperandKind.LITERAL, value)

    def resolve(self, context: Any) -> Any:
        """Resolve the operand against a context."""
        if self.kind is OperandKind.SELF:
            return context
        if self.kind is OperandKind.PATH:
            if context is not None:
                resolved = resolve_path(context, self.value)
                if resolved is not MISSING:
                    return resolved
            return self.value
        if self.kind is OperandKind.NODE:
            return self.value.evaluate(context)
        return self.value

    def to_canonical(self) -> Any:
        """Serialized form of the operand."""
        if self.kind is OperandKind.NODE:
            return self.value.to_canonical_form()
        if self.kind is OperandKind.SELF:
            return SELF_TOKEN
        return self.value


class Operator(ABC):
    """
    Base class for rule tree nodes.

    Subclasses set ``name`` to their registry key and implement
    ``evaluate`` and ``to_canonical_form``. Nodes are immutable once built
    and can be evaluated repeatedly, from any thread.
    """

    name: ClassVar[str] = ""

    __slots__ = ()

    @abstractmethod
    def evaluate(self, context: Any = None) -> bool:
        """Evaluate the node against a context."""

    @abstractmethod
    def to_canonical_form(self) -> Dict[str, Any]:
        """Return the node as a rule document."""

    @abstractmethod
    def _key(self) -> Tuple[Any, ...]:
        """Values that identify the node, for equality and repr."""

    def _document(self, args: List[Any]) -> Dict[str, Any]:
        return {"operator": self.name, "args": args}

    def __eq__(self, other: object) -> bool:
        if type(self) is not type(other):
            return NotImplemented
        return self._key() == other._key()

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"{type(self).__name__}{self._key()!r}"


# ---------------------------------------------------------------------------
# Logical operators
# ---------------------------------------------------------------------------


class And(Operator):
    """True when every operand is truthy. Stops at the first falsy one."""

    name = "and"

    __slots__ = ("_operands",)

    def __init__(self, *operands: Any):
        self._operands = tuple(Operand.of(o) for o in operands)

    @property
    def operands(self) -> Tuple[Any, ...]:
        return tuple(o.value for o in self._operands)

    def evaluate(self, context: Any = None) -> bool:
        for operand in self._operands:
            if not is_truthy(operand.resolve(context)):
                return False
        return True

    def to_canonical_form(self) -> Dict[str, Any]:
        return self._document([o.to_canonical() for o in self._operands])

    def _key(self) -> Tuple[Any, ...]:
        return self._operands


class Or(Operator):
    """True when any operand is truthy. Stops at the first truthy one."""

    name = "or"

    __slots__ = ("_operands",)

    def __init__(self, *operands: Any):
        self._operands = tuple(Operand.of(o) for o in operands)

    @property
    def operands(self) -> Tuple[Any, ...]:
        return tuple(o.value for o in self._operands)

    def evaluate(self, context: Any = None) -> bool:
        for operand in self._operands:
            if is_truthy(operand.resolve(context)):
                return True
        return False

    def to_canonical_form(self) -> Dict[str, Any]:
        return self._document([o.to_canonical() for o in self._operands])

    def _key(self) -> Tuple[Any, ...]:
        return self._operands


class Not(Operator):
    """Negates the truthiness of its operand."""

    name = "not"

    __slots__ = ("_operand",)

    def __init__(self, operand: Any):
        self._operand = Operand.of(operand)

    @property
    def operand(self) -> Any:
        return self._operand.value

    def evaluate(self, context: Any = None) -> bool:
        return not is_truthy(self._operand.resolve(context))

    def to_canonical_form(self) -> Dict[str, Any]:
        return self._document([self._operand.to_canonical()])

    def _key(self) -> Tuple[Any, ...]:
        return (self._operand,)


# ---------------------------------------------------------------------------
# Comparison operators
# ---------------------------------------------------------------------------


class Comparison(Operator):
    """
    Binary comparison between two operands.

    Date-like operands are compared chronologically whatever their
    representation; see ``compare_values``.
    """

    relation: ClassVar[str] = ""

    __slots__ = ("_left", "_right")

    def __init__(self, left: Any, right: Any):
        self._left = Operand.of(left)
        self._right = Operand.of(right)

    @property
    def left(self) -> Any:
        return self._left.value

    @property
    def right(self) -> Any:
        return self._right.value

    def evaluate(self, context: Any = None) -> bool:
        return compare_values(
            self._left.resolve(context),
            self._right.resolve(context),
            self.relation,
        )

    def to_canonical_form(self) -> Dict[str, Any]:
        return self._document([self._left.to_canonical(), self._right.to_canonical()])

    def _key(self) -> Tuple[Any, ...]:
        return (self._left, self._right)


class Eq(Comparison):
    """Strict equality."""
    name = "eq"
    relation = "==="
    __slots__ = ()


class Ne(Comparison):
    """Strict inequality."""
    name = "ne"
    relation = "!=="
    __slots__ = ()


class Gt(Comparison):
    name = "gt"
    relation = ">"
    __slots__ = ()


class Gte(Comparison):
    name = "gte"
    relation = ">="
    __slots__ = ()


class Lt(Comparison):
    name = "lt"
    relation = "<"
    __slots__ = ()


class Lte(Comparison):
    name = "lte"
    relation = "<="
    __slots__ = ()


# ---------------------------------------------------------------------------
# Membership operators
# ---------------------------------------------------------------------------


class Membership(Operator):
    """
    Tests whether a resolved value appears in a fixed list.

    The list itself is never resolved against the context.
    """

    negate: ClassVar[bool] = False

    __slots__ = ("_value", "_values")

    def __init__(self, value: Any, values: Any):
        self._value = Operand.of(value)
        self._values = tuple(values) if is_array(values) else values

    @property
    def value(self) -> Any:
        return self._value.value

    @property
    def values(self) -> Any:
        return self._values

    def _contains(self, context: Any) -> Optional[bool]:
        if not is_array(self._values):
            return None
        resolved = self._value.resolve(context)
        return any(strict_equals(resolved, item) for item in self._values)

    def evaluate(self, context: Any = None) -> bool:
        found = self._contains(context)
        if found is None:
            return self.negate
        return not found if self.negate else found

    def to_canonical_form(self) -> Dict[str, Any]:
        values = list(self._values) if is_array(self._values) else self._values
        return self._document([self._value.to_canonical(), values])

    def _key(self) -> Tuple[Any, ...]:
        return (self._value, self._values)


class In(Membership):
    """True when the value is one of ``values``."""
    name = "in"
    __slots__ = ()


class NotIn(Membership):
    """True when the value is not one of ``values``, or ``values`` is not a list."""
    name = "notIn"
    negate = True
    __slots__ = ()


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------


def and_(*operands: Any) -> And:
    return And(*operands)


def or_(*operands: Any) -> Or:
    return Or(*operands)


def not_(operand: Any) -> Not:
    return Not(operand)


def eq(left: Any, right: Any) -> Eq:
    return Eq(left, right)


def ne(left: Any, right: Any) -> Ne:
    return Ne(left, right)


def gt(left: Any, right: Any) -> Gt:
    return Gt(left, right)


def gte(left: Any, right: Any) -> Gte:
    return Gte(left, right)


def lt(left: Any, right: Any) -> Lt:
    return Lt(left, right)


def lte(left: Any, right: Any) -> Lte:
    return Lte(left, right)


def in_(value: Any, values: Any) -> In:
    return In(value, values)


def not_in(value: Any, values: Any) -> NotIn:
    return NotIn(value, values)
