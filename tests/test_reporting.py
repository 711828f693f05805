"""Tests for the JSON and Rich reporters."""

from pathlib import Path

from rich.console import Console

from stalecop.errors import RuleExecutionError
from stalecop.findings.models import Location, Offense
from stalecop.reporting.console import print_offenses
from stalecop.reporting.json_report import build_report

RULE_ID = "Rails/ModuleLevelRelativeDate"


def _offense(path: Path) -> Offense:
    return Offense(
        rule_id=RULE_ID,
        message="Do not use `Time.now` at the module level as it will be evaluated only once.",
        location=Location(path=path, line=2, column=11, snippet="Time.now"),
    )


def _error() -> RuleExecutionError:
    return RuleExecutionError("Test/Explode", 3, 5, RuntimeError("boom"))


def test_build_report_groups_offenses_by_file():
    stale, clean = Path("stale.rb"), Path("clean.rb")
    report = build_report([_offense(stale)], [stale, clean])
    assert report.offense_count == 1
    assert report.inspected_file_count == 2
    assert report.aborted_file_count == 0
    assert [len(f.offenses) for f in report.files] == [1, 0]
    assert all(f.error is None for f in report.files)


def test_build_report_marks_aborted_file():
    report = build_report([], [Path("clean.rb")], {Path("bad.rb"): _error()})
    assert report.inspected_file_count == 1
    assert report.aborted_file_count == 1
    bad = report.files[-1]
    assert bad.path == Path("bad.rb")
    assert bad.offenses == []
    assert (bad.error.rule_id, bad.error.line, bad.error.column) == ("Test/Explode", 3, 5)
    assert "boom" in bad.error.message


def test_console_lists_aborted_file():
    console = Console(record=True, width=160)
    print_offenses([], analyzed_files=[Path("clean.rb")], console=console, aborted={Path("bad.rb"): _error()})
    output = console.export_text()
    assert "ABORTED" in output
    assert "Test/Explode at 3:5" in output
    assert "1 file aborted" in output


def test_console_clean_run():
    console = Console(record=True, width=160)
    print_offenses([], console=console)
    assert "No offenses found." in console.export_text()
