# Dispatcher: one depth-first pre-order walk per file, handing each node to the
# registered rules interested in it and collecting their offenses.

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Union

from stalecop.errors import RuleExecutionError
from stalecop.findings.collector import OffenseCollector
from stalecop.findings.models import Offense
from stalecop.rules.base import Rule
from stalecop.rules.registry import RuleRegistry
from stalecop.syntax.nodes import SyntaxNode, walk

logger = logging.getLogger(__name__)


def _as_registry(rules: Union[RuleRegistry, Iterable[Rule]]) -> RuleRegistry:
    if isinstance(rules, RuleRegistry):
        return rules.freeze()
    registry = RuleRegistry()
    for rule in rules:
        registry.register(rule)
    return registry.freeze()


def analyze(
    tree: SyntaxNode,
    rules: Union[RuleRegistry, Iterable[Rule]],
    path: Path = Path("<source>"),
) -> list[Offense]:
    """
    Run every rule over tree and return the offenses in traversal order.

    Each node is visited exactly once; rules interested in it run in
    registration order. Rules cannot stop or steer the walk.

    A plain iterable of rules is registered into a fresh registry, so
    duplicate ids raise DuplicateRuleError before anything is visited.

    Raises:
        RuleExecutionError: a rule's visit() raised. The run for this file is
            aborted and no partial offense list is returned.
    """
    registry = _as_registry(rules)
    collector = OffenseCollector(path)
    sinks = {entry.id: collector.sink_for(entry.id, entry.severity) for entry in registry}

    visited = 0
    for node in walk(tree):
        visited += 1
        for entry in registry.rules_for(node):
            try:
                entry.rule.visit(node, sinks[entry.id])
            except Exception as exc:
                logger.debug("Rule %s raised on %s in %s", entry.id, node, path)
                raise RuleExecutionError(entry.id, node.line, node.column, exc) from exc

    collector.close()
    offenses = list(collector.offenses())
    logger.debug("Analyzed %s: %d node(s), %d offense(s)", path, visited, len(offenses))
    return offenses
