# Error taxonomy for the analysis engine: configuration, tree contract and rule failures.

from __future__ import annotations


class StalecopError(Exception):
    """Base class for every error raised by the engine (never for offenses)."""


class ConfigurationError(StalecopError):
    """The rule set or config is invalid; raised before any analysis runs."""


class DuplicateRuleError(ConfigurationError):
    """A rule id was registered twice."""

    def __init__(self, rule_id: str) -> None:
        super().__init__(f"Rule {rule_id!r} is already registered")
        self.rule_id = rule_id


class RegistryFrozenError(ConfigurationError):
    """register() was called after the registry was frozen for a run."""


class MalformedTreeError(StalecopError):
    """A syntax node broke the tree contract (missing field, second parent, ...)."""


class RuleExecutionError(StalecopError):
    """
    A rule's visit() raised. Aborts the analysis of the current file.

    Carries the failing rule id and the 1-based location of the node the
    rule was visiting; the original exception is chained as __cause__.
    """

    def __init__(self, rule_id: str, line: int, column: int, cause: BaseException) -> None:
        super().__init__(
            f"Rule {rule_id!r} failed at {line}:{column}: {type(cause).__name__}: {cause}"
        )
        self.rule_id = rule_id
        self.line = line
        self.column = column
