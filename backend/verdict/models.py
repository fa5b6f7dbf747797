"""
Pydantic models for Verdict.

RuleDocument describes the wire form of a rule tree; EngineConfig holds the
engine's settings.
"""

from __future__ import annotations

from typing import Any, Dict, List, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RuleDocument(BaseModel):
    """
    Canonical serialized form of an operator node.

    Nested arguments stay plain dicts; only the top level is validated so
    that documents loaded from text fail early with a clear message.
    """

    model_config = ConfigDict(extra="forbid")

    operator: str = Field(..., description="Registered operator name")
    args: List[Any] = Field(default_factory=list, description="Positional operator arguments")

    @field_validator("operator")
    @classmethod
    def validate_operator(cls, v: str) -> str:
        """Operator names must be non-empty."""
        if not v:
            raise ValueError("operator must be a non-empty string")
        return v

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a plain dictionary."""
        return {"operator": self.operator, "args": list(self.args)}


class EngineConfig(BaseModel):
    """Engine settings."""

    model_config = ConfigDict(extra="forbid")

    trace: bool = Field(False, description="Log every evaluation result at DEBUG level")
    match_strategy: Literal["first_match", "all_match"] = Field(
        "all_match",
        description="Whether evaluate_rules stops at the first matching rule",
    )
