# Rule registry: explicit registration, duplicate detection, and the kind -> rules
# dispatch index built once when the registry is frozen for a run.

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator, Optional

from stalecop.errors import ConfigurationError, DuplicateRuleError, RegistryFrozenError
from stalecop.rules.base import SEVERITIES, Rule
from stalecop.syntax.nodes import NodeKind, SyntaxNode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegisteredRule:
    """A rule plus the severity it reports with in this registry."""

    rule: Rule
    severity: str

    @property
    def id(self) -> str:
        return self.rule.id


class RuleRegistry:
    """
    Ordered set of rules for an analysis run.

    register() rules, then freeze() before analysis; after that the registry
    is read-only and safe to share between threads. Rules interested in the
    same node are returned in registration order.
    """

    def __init__(self) -> None:
        self._entries: list[RegisteredRule] = []
        self._ids: set[str] = set()
        self._frozen = False
        self._by_kind: dict[NodeKind, tuple[RegisteredRule, ...]] = {}
        self._send_by_name: dict[str, tuple[RegisteredRule, ...]] = {}
        self._send_unrestricted: tuple[RegisteredRule, ...] = ()

    def register(self, rule: Rule, severity: Optional[str] = None) -> RegisteredRule:
        """
        Add a rule. severity overrides the rule's default severity.

        Raises:
            RegistryFrozenError: the registry was already frozen.
            DuplicateRuleError: a rule with the same id is registered.
            ConfigurationError: missing id, empty interest set or unknown severity.
        """
        if self._frozen:
            raise RegistryFrozenError("Cannot register rules after the registry is frozen")

        rule_id = getattr(rule, "id", None)
        if not rule_id:
            raise ConfigurationError(f"{type(rule).__name__} has no id")
        if rule_id in self._ids:
            raise DuplicateRuleError(rule_id)
        if not rule.interest_kinds:
            raise ConfigurationError(f"Rule {rule_id!r} declares no interest kinds")

        effective = severity or rule.severity
        if effective not in SEVERITIES:
            raise ConfigurationError(
                f"Unknown severity {effective!r} for rule {rule_id!r}; expected one of {', '.join(SEVERITIES)}"
            )

        entry = RegisteredRule(rule=rule, severity=effective)
        self._entries.append(entry)
        self._ids.add(rule_id)
        logger.debug("Registered rule %s (severity=%s)", rule_id, effective)
        return entry

    def freeze(self) -> "RuleRegistry":
        """Build the dispatch index and make the registry read-only. Idempotent."""
        if self._frozen:
            return self

        by_kind: dict[NodeKind, list[RegisteredRule]] = {}
        for entry in self._entries:
            for kind in entry.rule.interest_kinds:
                by_kind.setdefault(kind, []).append(entry)
        self._by_kind = {kind: tuple(entries) for kind, entries in by_kind.items()}

        # SEND is the hot kind: resolve method-name restrictions up front,
        # keeping registration order within each list.
        send_entries = self._by_kind.get(NodeKind.SEND, ())
        self._send_unrestricted = tuple(
            e for e in send_entries if e.rule.restrict_on_send is None
        )
        names: set[str] = set()
        for e in send_entries:
            if e.rule.restrict_on_send is not None:
                names.update(e.rule.restrict_on_send)
        self._send_by_name = {
            name: tuple(
                e
                for e in send_entries
                if e.rule.restrict_on_send is None or name in e.rule.restrict_on_send
            )
            for name in names
        }

        self._frozen = True
        logger.debug(
            "Registry frozen: %d rule(s), %d indexed kind(s)", len(self._entries), len(self._by_kind)
        )
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def rules_for(self, node: SyntaxNode) -> tuple[RegisteredRule, ...]:
        """Rules that should visit node, in registration order. Requires a frozen registry."""
        if not self._frozen:
            raise ConfigurationError("Registry must be frozen before dispatch")
        if node.kind is NodeKind.SEND:
            if node.method_name is None:
                return self._send_unrestricted
            return self._send_by_name.get(node.method_name, self._send_unrestricted)
        return self._by_kind.get(node.kind, ())

    def get(self, rule_id: str) -> Optional[RegisteredRule]:
        for entry in self._entries:
            if entry.id == rule_id:
                return entry
        return None

    @property
    def rules(self) -> tuple[Rule, ...]:
        return tuple(e.rule for e in self._entries)

    def __iter__(self) -> Iterator[RegisteredRule]:
        return iter(tuple(self._entries))

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, rule_id: object) -> bool:
        return rule_id in self._ids
