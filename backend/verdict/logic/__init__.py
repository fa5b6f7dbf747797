"""
Logic engine for Verdict.

Provides the operator tree, path resolution, value comparison,
serialization and the evaluation engine.
"""

from .paths import MISSING, get_value, resolve_path
from .compare import compare_values, is_date_like, is_truthy, normalize_date, strict_equals
from .operators import (
    SELF,
    SELF_TOKEN,
    And,
    Comparison,
    Eq,
    Gt,
    Gte,
    In,
    Lt,
    Lte,
    Membership,
    Ne,
    Not,
    NotIn,
    Operand,
    OperandKind,
    Operator,
    Or,
    SelfReference,
    and_,
    eq,
    gt,
    gte,
    in_,
    lt,
    lte,
    ne,
    not_,
    not_in,
    or_,
)
from .quantifiers import AllOf, AnyOf, NoneOf, Quantifier, all_, any_, none
from .serializer import DEFAULT_OPERATORS, RuleSerializer, deserialize, serialize
from .engine import Engine

__all__ = [
    # Paths
    "MISSING",
    "get_value",
    "resolve_path",
    # Comparison
    "compare_values",
    "is_date_like",
    "is_truthy",
    "normalize_date",
    "strict_equals",
    # Operators
    "SELF",
    "SELF_TOKEN",
    "SelfReference",
    "Operand",
    "OperandKind",
    "Operator",
    "And",
    "Or",
    "Not",
    "Comparison",
    "Eq",
    "Ne",
    "Gt",
    "Gte",
    "Lt",
    "Lte",
    "Membership",
    "In",
    "NotIn",
    "Quantifier",
    "AnyOf",
    "AllOf",
    "NoneOf",
    # Builders
    "and_",
    "or_",
    "not_",
    "eq",
    "ne",
    "gt",
    "gte",
    "lt",
    "lte",
    "in_",
    "not_in",
    "any_",
    "all_",
    "none",
    # Serialization
    "DEFAULT_OPERATORS",
    "RuleSerializer",
    "serialize",
    "deserialize",
    # Engine
    "Engine",
]
