"""Tests for stalecop.config: default rules, disabling, severity overrides."""

import pytest

from stalecop.config import Config, build_registry, get_default_config, get_enabled_rules
from stalecop.errors import ConfigurationError, DuplicateRuleError
from stalecop.rules.module_level_relative_date import ModuleLevelRelativeDateRule

RULE_ID = "Rails/ModuleLevelRelativeDate"


def test_default_config_has_relative_date_rule():
    config = get_default_config()
    assert [r.id for r in config.rules] == [RULE_ID]


def test_get_enabled_rules_defaults():
    assert [r.id for r in get_enabled_rules()] == [RULE_ID]


def test_disabled_rule_left_out():
    config = get_default_config()
    config.disabled_rules.add(RULE_ID)
    assert get_enabled_rules(config) == []
    assert len(build_registry(config)) == 0


def test_unknown_disabled_rule_rejected():
    config = get_default_config()
    config.disabled_rules.add("Rails/Nope")
    with pytest.raises(ConfigurationError):
        build_registry(config)


def test_severity_override_applied():
    config = get_default_config()
    config.severity_overrides[RULE_ID] = "error"
    registry = build_registry(config)
    assert registry.get(RULE_ID).severity == "error"


def test_bad_severity_override_rejected():
    config = get_default_config()
    config.severity_overrides[RULE_ID] = "loud"
    with pytest.raises(ConfigurationError):
        build_registry(config)


def test_duplicate_rules_in_config_rejected():
    config = Config(rules=[ModuleLevelRelativeDateRule(), ModuleLevelRelativeDateRule()])
    with pytest.raises(DuplicateRuleError):
        build_registry(config)


def test_build_registry_returns_frozen_registry():
    assert build_registry().frozen
