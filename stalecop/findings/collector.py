# Offense collection for one analysis run: rules report through a sink bound to their id.

from __future__ import annotations

from pathlib import Path

from stalecop.findings.models import Location, Offense
from stalecop.syntax.nodes import SyntaxNode


class OffenseCollector:
    """
    Accumulates offenses for one file in report order.

    No deduplication: two rules flagging the same node produce two offenses.
    Call close() when the run is done; offenses() is read-only after that.
    """

    def __init__(self, path: Path) -> None:
        self.path = path
        self._offenses: list[Offense] = []
        self._closed = False

    def add(self, rule_id: str, severity: str, node: SyntaxNode, message: str) -> Offense:
        if self._closed:
            raise RuntimeError("Cannot report offenses after the run has completed")
        rng = node.source_range
        offense = Offense(
            rule_id=rule_id,
            message=message,
            location=Location(
                path=self.path,
                line=rng.line,
                column=rng.column,
                end_line=rng.end_line,
                end_column=rng.end_column,
                snippet=node.text,
            ),
            severity=severity,
        )
        self._offenses.append(offense)
        return offense

    def sink_for(self, rule_id: str, severity: str) -> "ReportSink":
        return ReportSink(self, rule_id, severity)

    def close(self) -> None:
        self._closed = True

    def offenses(self) -> tuple[Offense, ...]:
        return tuple(self._offenses)

    def __len__(self) -> int:
        return len(self._offenses)


class ReportSink:
    """What a rule's visit() receives. report() is the only side effect a rule may have."""

    __slots__ = ("_collector", "rule_id", "severity")

    def __init__(self, collector: OffenseCollector, rule_id: str, severity: str) -> None:
        self._collector = collector
        self.rule_id = rule_id
        self.severity = severity

    def report(self, node: SyntaxNode, message: str) -> None:
        self._collector.add(self.rule_id, self.severity, node, message)
