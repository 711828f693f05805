"""
Analyzer configuration: which rules are enabled, how they report, and the
registry built from them.

Config files are not read here; callers (the CLI, tests) fill in a Config
and build_registry() turns it into the frozen RuleRegistry a run uses.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Set

from stalecop.errors import ConfigurationError
from stalecop.rules.base import Rule
from stalecop.rules.module_level_relative_date import ModuleLevelRelativeDateRule
from stalecop.rules.registry import RuleRegistry


@dataclass
class Config:
    """
    Analyzer configuration.

    rules: every available rule, in registration (and therefore report) order.
    disabled_rules: ids to leave out of the registry.
    severity_overrides: rule id -> severity replacing the rule's default.
    """

    rules: Sequence[Rule] = field(default_factory=list)
    disabled_rules: Set[str] = field(default_factory=set)
    severity_overrides: Dict[str, str] = field(default_factory=dict)


def get_default_config() -> Config:
    """Return the default configuration with all implemented rules enabled."""
    rules: List[Rule] = [
        ModuleLevelRelativeDateRule(),
    ]
    return Config(rules=rules)


def _check_known_ids(config: Config) -> None:
    known = {rule.id for rule in config.rules}
    unknown = (set(config.disabled_rules) | set(config.severity_overrides)) - known
    if unknown:
        raise ConfigurationError(f"Unknown rule id(s): {', '.join(sorted(unknown))}")


def get_enabled_rules(config: Optional[Config] = None) -> Sequence[Rule]:
    """Return the rules of config (or the default config) that are not disabled."""
    if config is None:
        config = get_default_config()
    _check_known_ids(config)
    return [rule for rule in config.rules if rule.id not in config.disabled_rules]


def build_registry(config: Optional[Config] = None) -> RuleRegistry:
    """
    Register the enabled rules of config and freeze the registry.

    Raises:
        ConfigurationError: unknown rule ids, duplicate ids or bad severities.
    """
    if config is None:
        config = get_default_config()
    registry = RuleRegistry()
    for rule in get_enabled_rules(config):
        registry.register(rule, severity=config.severity_overrides.get(rule.id))
    return registry.freeze()
