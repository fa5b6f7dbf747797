"""
Rule serialization.

Converts operator trees to rule documents and back:

    {"operator": "and", "args": [
        {"operator": "eq", "args": ["user.status", "active"]},
        {"operator": "gt", "args": ["user.age", 18]}
    ]}

The SELF operand has no JSON representation and travels as the reserved
string token "#$self$#".
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any, Dict, Optional, Type, Union

import yaml
from pydantic import ValidationError

from ..errors import InvalidRuleDocumentError, UnknownOperatorError
from ..models import RuleDocument
from .operators import (
    SELF,
    SELF_TOKEN,
    And,
    Eq,
    Gt,
    Gte,
    In,
    Lt,
    Lte,
    Ne,
    Not,
    NotIn,
    Operator,
    Or,
)
from .quantifiers import AllOf, AnyOf, NoneOf

logger = logging.getLogger(__name__)

DEFAULT_OPERATORS: Dict[str, Type[Operator]] = {
    "and": And,
    "or": Or,
    "not": Not,
    "eq": Eq,
    "ne": Ne,
    "gt": Gt,
    "gte": Gte,
    "lt": Lt,
    "lte": Lte,
    "in": In,
    "notIn": NotIn,
    "any": AnyOf,
    "all": AllOf,
    "none": NoneOf,
}


class RuleSerializer:
    """
    Converts between operator trees and rule documents.

    Each serializer owns a copy of the operator registry, so custom operators
    registered on one instance do not leak into others.
    """

    def __init__(self, operators: Optional[Dict[str, Type[Operator]]] = None):
        """
        Initialize the serializer.

        Args:
            operators: Additional operators keyed by name. Entries override
                the built-in operators of the same name.
        """
        self.operators: Dict[str, Type[Operator]] = dict(DEFAULT_OPERATORS)
        for name, operator_cls in (operators or {}).items():
            self.register(name, operator_cls)

    def register(self, name: str, operator_cls: Type[Operator]) -> None:
        """Register an operator class under ``name``."""
        if not (isinstance(operator_cls, type) and issubclass(operator_cls, Operator)):
            raise TypeError(f"Cannot register {operator_cls!r}: not an Operator subclass")
        logger.debug("Registering operator %r -> %s", name, operator_cls.__name__)
        self.operators[name] = operator_cls

    def serialize(self, rule: Operator) -> Dict[str, Any]:
        """Convert an operator tree to its rule document."""
        return rule.to_canonical_form()

    def deserialize(self, document: Union[Mapping, RuleDocument]) -> Operator:
        """
        Rebuild an operator tree from a rule document.

        Args:
            document: A mapping with ``operator`` and ``args`` keys, or a
                RuleDocument.

        Returns:
            The root operator.

        Raises:
            UnknownOperatorError: If any document names an unregistered
                operator.
        """
        if isinstance(document, RuleDocument):
            document = document.to_dict()

        name = document["operator"]
        operator_cls = self.operators.get(name)
        if operator_cls is None:
            raise UnknownOperatorError(name)

        args = [self._deserialize_arg(arg) for arg in document.get("args", [])]
        return operator_cls(*args)

    def _deserialize_arg(self, arg: Any) -> Any:
        if isinstance(arg, str) and arg == SELF_TOKEN:
            return SELF
        if isinstance(arg, Mapping) and "operator" in arg:
            return self.deserialize(arg)
        return arg

    def dumps(self, rule: Operator, **kwargs: Any) -> str:
        """Serialize a rule to JSON text. Extra arguments go to json.dumps."""
        return json.dumps(self.serialize(rule), **kwargs)

    def loads(self, text: Union[str, bytes]) -> Operator:
        """Build a rule from JSON text."""
        try:
            data = json.loads(text)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise InvalidRuleDocumentError(f"Invalid JSON rule document: {e}") from e
        return self.deserialize(self._validate(data))

    def to_yaml(self, rule: Operator) -> str:
        """Serialize a rule to YAML text."""
        return yaml.safe_dump(self.serialize(rule), default_flow_style=False, allow_unicode=True)

    def from_yaml(self, text: str) -> Operator:
        """Build a rule from YAML text."""
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise InvalidRuleDocumentError(f"Invalid YAML rule document: {e}") from e
        return self.deserialize(self._validate(data))

    def _validate(self, data: Any) -> RuleDocument:
        try:
            return RuleDocument.model_validate(data)
        except ValidationError as e:
            raise InvalidRuleDocumentError(f"Not a rule document: {e}") from e


_default_serializer = RuleSerializer()


def serialize(rule: Operator) -> Dict[str, Any]:
    """Convert an operator tree to its rule document."""
    return _default_serializer.serialize(rule)


def deserialize(document: Union[Mapping, RuleDocument]) -> Operator:
    """Rebuild an operator tree using the built-in operators."""
    return _default_serializer.deserialize(document)
