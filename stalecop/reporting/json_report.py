# Machine-readable output: offenses serialized through their pydantic models.

from __future__ import annotations

from pathlib import Path
from typing import Mapping, Optional, Sequence

from pydantic import BaseModel, Field

from stalecop.errors import RuleExecutionError
from stalecop.findings.models import Offense


class AbortedAnalysis(BaseModel):
    """Why a file has no results: the rule that failed and where."""

    rule_id: str
    line: int
    column: int
    message: str

    @classmethod
    def from_error(cls, error: RuleExecutionError) -> "AbortedAnalysis":
        return cls(rule_id=error.rule_id, line=error.line, column=error.column, message=str(error))


class FileReport(BaseModel):
    path: Path
    offenses: list[Offense] = Field(default_factory=list)
    error: Optional[AbortedAnalysis] = None


class Report(BaseModel):
    """Top-level JSON document: one entry per file, offense and file counts."""

    files: list[FileReport]
    offense_count: int
    inspected_file_count: int
    aborted_file_count: int = 0


def build_report(
    offenses: Sequence[Offense],
    analyzed_files: Sequence[Path],
    aborted: Optional[Mapping[Path, RuleExecutionError]] = None,
) -> Report:
    by_path: dict[str, list[Offense]] = {str(p): [] for p in analyzed_files}
    for o in offenses:
        by_path.setdefault(str(o.location.path), []).append(o)
    files = [FileReport(path=Path(p), offenses=items) for p, items in by_path.items()]
    for path, error in (aborted or {}).items():
        files.append(FileReport(path=path, error=AbortedAnalysis.from_error(error)))
    return Report(
        files=files,
        offense_count=len(offenses),
        inspected_file_count=len(by_path),
        aborted_file_count=len(aborted or {}),
    )


def render_json(
    offenses: Sequence[Offense],
    analyzed_files: Sequence[Path],
    aborted: Optional[Mapping[Path, RuleExecutionError]] = None,
    indent: int = 2,
) -> str:
    return build_report(offenses, analyzed_files, aborted).model_dump_json(indent=indent)
