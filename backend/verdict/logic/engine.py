"""
Rule engine.

Thin entry point for evaluating operator trees against a context.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from ..models import EngineConfig
from .operators import Operator

logger = logging.getLogger(__name__)

RuleSet = Union[Mapping, Iterable[Tuple[str, Operator]]]


class Engine:
    """
    Evaluates rules against contexts.

    The engine holds no state besides its configuration; one instance can
    be shared freely.
    """

    def __init__(self, config: Optional[Union[EngineConfig, Dict[str, Any]]] = None):
        """
        Initialize the engine.

        Args:
            config: EngineConfig or a dict with its fields (trace,
                match_strategy).
        """
        if config is None:
            config = EngineConfig()
        elif not isinstance(config, EngineConfig):
            config = EngineConfig.model_validate(config)
        self.config = config

    def evaluate(self, rule: Operator, context: Any = None) -> bool:
        """
        Evaluate a rule.

        Args:
            rule: Root operator of the rule tree.
            context: Data the rule is evaluated against. Defaults to an
                empty dict.

        Returns:
            The rule outcome.
        """
        if context is None:
            context = {}
        result = bool(rule.evaluate(context))
        if self.config.trace:
            logger.debug("Rule %r evaluated to %s", rule.name, result)
        return result

    def evaluate_rules(self, rules: RuleSet, context: Any = None) -> List[str]:
        """
        Evaluate several named rules against one context.

        Args:
            rules: Mapping of rule id to operator, or (id, operator) pairs.
            context: Data the rules are evaluated against.

        Returns:
            Ids of the matching rules, in input order. With the
            ``first_match`` strategy at most one id is returned.
        """
        items = rules.items() if isinstance(rules, Mapping) else rules
        matched: List[str] = []

        for rule_id, rule in items:
            if not self.evaluate(rule, context):
                continue
            matched.append(rule_id)
            if self.config.match_strategy == "first_match":
                break

        if self.config.trace:
            logger.debug("Matched %d rule(s): %s", len(matched), matched)
        return matched
