"""
Errors raised by the rule engine.

Evaluation never raises: missing paths, type mismatches and failing
quantifier conditions all degrade to a boolean. Errors only surface while
building rules from documents.
"""

from __future__ import annotations

from typing import Optional


class RuleError(Exception):
    """Base class for rule engine errors."""


class UnknownOperatorError(RuleError, ValueError):
    """Raised when a rule document names an operator that is not registered."""

    def __init__(self, operator: str, message: Optional[str] = None):
        self.operator = operator
        super().__init__(message or f"Unknown operator: {operator!r}")


class InvalidRuleDocumentError(RuleError, ValueError):
    """Raised when serialized text does not decode to a rule document."""
