"""
Verdict: declarative boolean rules for Python applications.

Rules are built programmatically as operator trees, evaluated against nested
data records, and stored as JSON rule documents.
"""

from .errors import InvalidRuleDocumentError, RuleError, UnknownOperatorError
from .models import EngineConfig, RuleDocument
from .logic import (
    MISSING,
    SELF,
    SELF_TOKEN,
    Engine,
    Operator,
    RuleSerializer,
    all_,
    and_,
    any_,
    compare_values,
    deserialize,
    eq,
    get_value,
    gt,
    gte,
    in_,
    is_date_like,
    lt,
    lte,
    ne,
    none,
    not_,
    not_in,
    or_,
    resolve_path,
    serialize,
)

__version__ = "0.1.0"
__all__ = [
    "Engine",
    "EngineConfig",
    "Operator",
    "RuleDocument",
    "RuleSerializer",
    "serialize",
    "deserialize",
    "SELF",
    "SELF_TOKEN",
    "MISSING",
    "resolve_path",
    "get_value",
    "compare_values",
    "is_date_like",
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
    "RuleError",
    "UnknownOperatorError",
    "InvalidRuleDocumentError",
]
