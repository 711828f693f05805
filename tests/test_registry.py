"""Tests for stalecop.rules.registry: registration rules and the dispatch index."""

import pytest

from stalecop.errors import ConfigurationError, DuplicateRuleError, RegistryFrozenError
from stalecop.rules.base import Rule
from stalecop.rules.registry import RuleRegistry
from stalecop.syntax.nodes import NodeKind, SourceRange, SyntaxNode

_RNG = SourceRange(start_byte=0, end_byte=0, start_point=(0, 0), end_point=(0, 0))


class _Rule(Rule):
    name = "test rule"

    def __init__(self, rule_id, kinds=frozenset({NodeKind.SEND}), restrict=None, severity="warning"):
        self.id = rule_id
        self.interest_kinds = frozenset(kinds)
        self.restrict_on_send = restrict
        self.severity = severity

    def visit(self, node, sink):
        return None


def _send(name):
    return SyntaxNode(NodeKind.SEND, _RNG, method_name=name)


def test_duplicate_id_rejected():
    registry = RuleRegistry()
    registry.register(_Rule("a"))
    with pytest.raises(DuplicateRuleError) as exc_info:
        registry.register(_Rule("a"))
    assert exc_info.value.rule_id == "a"
    assert isinstance(exc_info.value, ConfigurationError)


def test_register_after_freeze_rejected():
    registry = RuleRegistry()
    registry.register(_Rule("a"))
    registry.freeze()
    with pytest.raises(RegistryFrozenError):
        registry.register(_Rule("b"))


def test_empty_interest_kinds_rejected():
    with pytest.raises(ConfigurationError):
        RuleRegistry().register(_Rule("a", kinds=()))


def test_unknown_severity_rejected():
    with pytest.raises(ConfigurationError):
        RuleRegistry().register(_Rule("a", severity="catastrophic"))


def test_severity_override():
    registry = RuleRegistry()
    entry = registry.register(_Rule("a"), severity="error")
    assert entry.severity == "error"
    assert registry.get("a").severity == "error"


def test_rules_for_requires_frozen_registry():
    registry = RuleRegistry()
    registry.register(_Rule("a"))
    with pytest.raises(ConfigurationError):
        registry.rules_for(_send("now"))


def test_rules_for_keeps_registration_order():
    registry = RuleRegistry()
    for rule_id in ("z", "a", "m"):
        registry.register(_Rule(rule_id))
    registry.freeze()
    assert [e.id for e in registry.rules_for(_send("now"))] == ["z", "a", "m"]


def test_rules_for_filters_by_kind():
    registry = RuleRegistry()
    registry.register(_Rule("sends"))
    registry.register(_Rule("classes", kinds={NodeKind.CLASS}))
    registry.freeze()
    cls = SyntaxNode(NodeKind.CLASS, _RNG)
    assert [e.id for e in registry.rules_for(cls)] == ["classes"]
    assert registry.rules_for(SyntaxNode(NodeKind.DEF, _RNG)) == ()


def test_rules_for_applies_send_restrictions():
    registry = RuleRegistry()
    registry.register(_Rule("dates", restrict=frozenset({"now", "ago"})))
    registry.register(_Rule("all-sends"))
    registry.register(_Rule("ago-only", restrict=frozenset({"ago"})))
    registry.freeze()
    assert [e.id for e in registry.rules_for(_send("now"))] == ["dates", "all-sends"]
    assert [e.id for e in registry.rules_for(_send("ago"))] == ["dates", "all-sends", "ago-only"]
    assert [e.id for e in registry.rules_for(_send("puts"))] == ["all-sends"]
    assert [e.id for e in registry.rules_for(_send(None))] == ["all-sends"]


def test_freeze_is_idempotent_and_chainable():
    registry = RuleRegistry()
    registry.register(_Rule("a"))
    assert registry.freeze() is registry
    assert registry.freeze() is registry
    assert registry.frozen


def test_container_protocol():
    registry = RuleRegistry()
    rule = _Rule("a")
    registry.register(rule)
    assert "a" in registry
    assert "b" not in registry
    assert len(registry) == 1
    assert registry.rules == (rule,)
    assert [e.rule for e in registry] == [rule]
