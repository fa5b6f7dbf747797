"""
Tests for the rule engine.
"""

import json
import logging
import threading

import pytest
from pydantic import ValidationError

from backend.verdict import (
    SELF,
    Engine,
    EngineConfig,
    RuleSerializer,
    UnknownOperatorError,
    all_,
    and_,
    any_,
    eq,
    gt,
    in_,
    none,
    not_,
    or_,
)


@pytest.fixture
def engine():
    """Engine with default configuration."""
    return Engine()


class TestEngineEvaluate:
    """Tests for Engine.evaluate."""

    def test_literal_rule(self, engine):
        """Test literal rule."""
        assert engine.evaluate(eq(1, 1)) is True
        assert engine.evaluate(eq(1, 2)) is False

    def test_active_adult(self, engine):
        """Test active adult."""
        rule = and_(eq("user.status", "active"), gt("user.age", 18))
        assert engine.evaluate(rule, {"user": {"status": "active", "age": 25}})

    def test_admin_role(self, engine):
        """Test admin role."""
        rule = any_("user.roles", eq("name", "admin"))
        context = {"user": {"roles": [{"name": "user"}, {"name": "admin"}]}}
        assert engine.evaluate(rule, context)

    def test_no_admin_in_empty_roles(self, engine):
        """Test no admin in empty roles."""
        rule = none("user.roles", eq("name", "admin"))
        assert engine.evaluate(rule, {"user": {"roles": []}})

    def test_default_context_is_empty_record(self, engine):
        """Without a context, paths still resolve (to nothing)."""
        assert engine.evaluate(none("items", eq(SELF, 1)))
        assert not engine.evaluate(any_("items", eq(SELF, 1)))
        assert engine.evaluate(eq("user.age", "user.age"))

    def test_result_is_bool(self, engine):
        """Test result is bool."""
        assert engine.evaluate(and_("a"), {"a": 5}) is True

    def test_partial_context_never_raises(self, engine):
        """Test partial context never raises."""
        rule = and_(
            gt("user.age", 18),
            all_("user.roles", in_("name", ["admin", "user"])),
        )
        for context in ({}, {"user": None}, {"user": {"age": "old"}}, {"user": {"roles": 3}}, []):
            assert engine.evaluate(rule, context) is False

    def test_huge_integers_in_json_context(self, engine):
        """Test that integers beyond float range never raise."""
        context = json.loads('{"n": ' + "9" * 400 + '}')
        assert engine.evaluate(eq("n", 1), context) is False
        assert engine.evaluate(gt("n", 1), context) is True
        assert engine.evaluate(and_("n"), context) is True
        assert engine.evaluate(not_("n"), context) is False
        assert engine.evaluate(in_("n", [1, 2]), context) is False

    def test_unknown_operator_scenario(self):
        """Test unknown operator scenario."""
        with pytest.raises(UnknownOperatorError):
            RuleSerializer().deserialize({"operator": "bogus", "args": []})

    def test_concurrent_evaluation(self, engine):
        """Test concurrent evaluation."""
        rule = or_(
            any_("user.roles", eq("name", "admin")),
            gt("user.age", 65),
        )
        contexts = [
            ({"user": {"roles": [{"name": "admin"}], "age": 30}}, True),
            ({"user": {"roles": [], "age": 70}}, True),
            ({"user": {"roles": [{"name": "user"}], "age": 30}}, False),
        ]
        failures = []

        def worker():
            for _ in range(200):
                for context, expected in contexts:
                    if engine.evaluate(rule, context) is not expected:
                        failures.append(context)

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert failures == []


class TestEngineConfig:
    """Tests for engine configuration."""

    def test_defaults(self):
        """Test defaults."""
        config = Engine().config
        assert config.trace is False
        assert config.match_strategy == "all_match"

    def test_dict_config(self):
        """Test dict config."""
        engine = Engine({"trace": True, "match_strategy": "first_match"})
        assert isinstance(engine.config, EngineConfig)
        assert engine.config.match_strategy == "first_match"

    def test_invalid_strategy(self):
        """Test invalid strategy."""
        with pytest.raises(ValidationError):
            Engine({"match_strategy": "priority"})

    def test_unknown_field(self):
        """Test unknown field."""
        with pytest.raises(ValidationError):
            EngineConfig(verbose=True)

    def test_trace_logging(self, caplog):
        """Test trace logging."""
        engine = Engine(EngineConfig(trace=True))
        with caplog.at_level(logging.DEBUG, logger="backend.verdict.logic.engine"):
            engine.evaluate(eq(1, 1))
        assert "evaluated to True" in caplog.text

    def test_no_logging_without_trace(self, engine, caplog):
        """Test no logging without trace."""
        with caplog.at_level(logging.DEBUG, logger="backend.verdict.logic.engine"):
            engine.evaluate(eq(1, 1))
        assert caplog.text == ""


class TestEvaluateRules:
    """Tests for Engine.evaluate_rules."""

    @pytest.fixture
    def rules(self):
        return {
            "adult": gt("age", 17),
            "senior": gt("age", 64),
            "french": eq("country", "FR"),
        }

    def test_all_matches(self, engine, rules):
        """Test all matches."""
        assert engine.evaluate_rules(rules, {"age": 70, "country": "FR"}) == [
            "adult", "senior", "french",
        ]

    def test_no_matches(self, engine, rules):
        """Test no matches."""
        assert engine.evaluate_rules(rules, {"age": 10}) == []

    def test_first_match(self, rules):
        """Test first match."""
        engine = Engine({"match_strategy": "first_match"})
        assert engine.evaluate_rules(rules, {"age": 70, "country": "FR"}) == ["adult"]

    def test_pairs(self, engine):
        """Test rules given as name and rule pairs."""
        pairs = [("b", eq("x", 1)), ("a", eq("x", 1))]
        assert engine.evaluate_rules(pairs, {"x": 1}) == ["b", "a"]

    def test_default_context(self, engine):
        """Test default context."""
        assert engine.evaluate_rules({"always": and_()}) == ["always"]


class TestQuantifierLogging:
    """Tests for logging of swallowed condition errors."""

    def test_condition_error_is_logged(self, engine, caplog):
        """Test condition error is logged."""
        class Boom(type(eq(1, 1))):
            __slots__ = ()

            def evaluate(self, context=None):
                raise KeyError("boom")

        rule = any_("items", Boom(1, 1))
        with caplog.at_level(logging.DEBUG, logger="backend.verdict.logic.quantifiers"):
            assert engine.evaluate(rule, {"items": [1]}) is False
        assert "treating as unmatched" in caplog.text
