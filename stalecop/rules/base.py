# Rule interface (abstract base class): defines the contract all rules must implement.
# Concrete rules subclass Rule, declare which node kinds they want to see and implement visit().

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, ClassVar, FrozenSet, Optional

from stalecop.syntax.nodes import NodeKind, SyntaxNode

if TYPE_CHECKING:
    from stalecop.findings.collector import ReportSink

SEVERITIES = ("info", "refactor", "convention", "warning", "error", "fatal")


class Rule(ABC):
    """
    Abstract base class for all analysis rules ("cops").

    Subclasses must define:
    - id: str, stable identifier used in offenses (e.g. "Rails/ModuleLevelRelativeDate")
    - name: str, human-readable rule name
    - interest_kinds: the node kinds the dispatcher should hand to visit()
    - visit(node, sink): inspect one node and call sink.report() for offenses

    Optional:
    - restrict_on_send: for SEND nodes, only these method names are dispatched
    - message_template: str.format template rendered by message()
    - severity: default severity, overridable per run through the config
    - safe: whether an autocorrection would be safe; metadata only

    Rules are built once and reused for every file, possibly from several
    threads at once, so visit() must not keep per-file state on self.
    """

    id: ClassVar[str]
    name: ClassVar[str]
    interest_kinds: ClassVar[FrozenSet[NodeKind]] = frozenset()
    restrict_on_send: ClassVar[Optional[FrozenSet[str]]] = None
    message_template: ClassVar[str] = "{source}"
    severity: ClassVar[str] = "warning"
    safe: ClassVar[bool] = True

    def message(self, **values: Any) -> str:
        """Render message_template with the captured values."""
        return self.message_template.format(**values)

    @abstractmethod
    def visit(self, node: SyntaxNode, sink: "ReportSink") -> None:
        """
        Inspect one node and report offenses through sink.

        Args:
            node: A node whose kind is in interest_kinds (and, for SEND nodes
                  of restricted rules, whose method name is in restrict_on_send).
                  Use node.parent / stalecop.scope to look at its context.
            sink: Bound to this rule's id and effective severity; call
                  sink.report(node, message) once per offense.
        """
        ...

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.id}>"
