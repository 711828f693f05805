# Relative date calls at class/module level: Time.zone.now and friends evaluated once at load time.

from __future__ import annotations

from stalecop.findings.collector import ReportSink
from stalecop.rules.base import Rule
from stalecop.scope import BLOCK_KINDS, METHOD_KINDS, SCOPE_KINDS, nearest_enclosing_scope
from stalecop.syntax.nodes import NodeKind, SyntaxNode

RELATIVE_DATE_METHODS = frozenset(
    {
        "now",
        "since",
        "from_now",
        "after",
        "ago",
        "until",
        "before",
        "yesterday",
        "tomorrow",
    }
)

# Code under these runs on every call or yield.
GOOD_SCOPE_KINDS = METHOD_KINDS | BLOCK_KINDS


class ModuleLevelRelativeDateRule(Rule):
    """
    Flags relative date calls whose nearest scope is a class or module body.

    Such a call runs once when the class is loaded and the value is kept
    until the class is reloaded:

        # bad
        validates :start_at, comparison: { start_at: Time.zone.now }
        TODAY = Time.zone.now
        @@today = Time.zone.now

        # good
        validates :start_at, comparison: { start_at: -> { Time.zone.now } }
        def today
          Time.zone.now
        end
        @@today = -> { Time.zone.today }

    Unsafe: fixing it means moving the call into a method or a lambda.
    Calls at the top level of a file are not flagged.
    """

    id = "Rails/ModuleLevelRelativeDate"
    name = "Module-level relative date"
    interest_kinds = frozenset({NodeKind.SEND})
    restrict_on_send = RELATIVE_DATE_METHODS
    message_template = "Do not use `{source}` at the module level as it will be evaluated only once."
    severity = "warning"
    safe = False

    def visit(self, node: SyntaxNode, sink: ReportSink) -> None:
        if node.method_name not in RELATIVE_DATE_METHODS:
            return

        scope = nearest_enclosing_scope(node, SCOPE_KINDS)
        if scope is None or scope in GOOD_SCOPE_KINDS:
            return

        sink.report(node, self.message(source=node.text))
