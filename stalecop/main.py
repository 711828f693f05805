"""
Typer CLI entry point and orchestration of the analysis pipeline.

- Accepts a Ruby file or directory
- Finds .rb/.rake files (traversal.find_ruby_files for directories)
- Builds a FileContext per file and runs the frozen rule registry over it
- Prints offenses with Rich, or as JSON with --format json

Exit codes: 0 clean, 1 offenses found or a rule failed, 2 bad parameters.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from enum import Enum
from pathlib import Path
from typing import List, Optional

import typer
from rich import box
from rich.console import Console
from rich.table import Table
from tree_sitter import Parser

from stalecop.config import Config, build_registry, get_default_config
from stalecop.context import create_context
from stalecop.dispatcher import analyze as analyze_tree
from stalecop.errors import ConfigurationError, RuleExecutionError
from stalecop.findings.models import Offense
from stalecop.parser import create_parser
from stalecop.reporting.console import print_offenses
from stalecop.reporting.json_report import render_json
from stalecop.rules.registry import RuleRegistry
from stalecop.traversal import find_ruby_files, is_ruby_file

logger = logging.getLogger(__name__)

app = typer.Typer(help="stalecop - flags relative dates evaluated once at Ruby class/module load time.")

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


class OutputFormat(str, Enum):
    text = "text"
    json = "json"


class FileResult:
    """Outcome of analyzing one file: offenses, or the rule failure that aborted it."""

    def __init__(self, path: Path, offenses: List[Offense], error: Optional[RuleExecutionError] = None) -> None:
        self.path = path
        self.offenses = offenses
        self.error = error


_worker_state = threading.local()


def _thread_parser() -> Parser:
    # tree-sitter parsers hold per-parse state; one per worker thread
    parser = getattr(_worker_state, "parser", None)
    if parser is None:
        parser = create_parser()
        _worker_state.parser = parser
    return parser


def _collect_ruby_files(target: Path) -> List[Path]:
    """Resolve target into the Ruby files to analyze."""
    if target.is_file():
        if not is_ruby_file(target):
            raise typer.BadParameter(f"Target file must be a .rb or .rake file, got: {target}")
        return [target]

    if target.is_dir():
        files = find_ruby_files(target)
        if not files:
            logger.warning("No Ruby files found under %s", target)
        return files

    raise typer.BadParameter(f"Target path is neither a file nor a directory: {target}")


def analyze_file(path: Path, registry: RuleRegistry, parser: Optional[Parser] = None) -> Optional[FileResult]:
    """
    Analyze one file. Returns None if it could not be read (already logged).

    A failing rule aborts this file only: the error is logged and returned
    on the result, other files still run.
    """
    ctx = create_context(path, parser=parser or _thread_parser())
    if ctx is None:
        return None
    try:
        offenses = analyze_tree(ctx.root, registry, path=ctx.path)
    except RuleExecutionError as exc:
        logger.exception("Analysis of %s aborted: %s", path, exc)
        return FileResult(path, [], error=exc)
    return FileResult(path, offenses)


def analyze_files(files: List[Path], registry: RuleRegistry, jobs: int = 1) -> List[FileResult]:
    """Analyze files, in a thread pool when jobs > 1. Results keep the input order."""
    registry.freeze()
    if jobs <= 1 or len(files) <= 1:
        results = [analyze_file(path, registry) for path in files]
    else:
        with ThreadPoolExecutor(max_workers=jobs) as pool:
            results = list(pool.map(lambda p: analyze_file(p, registry), files))
    return [r for r in results if r is not None]


def _configure_logging(log_level: str) -> None:
    level = log_level.upper()
    if level not in _LOG_LEVELS:
        raise typer.BadParameter(f"--log-level must be one of {', '.join(_LOG_LEVELS)}")
    logging.basicConfig(level=getattr(logging, level), format="%(levelname)s %(name)s: %(message)s")


@app.command()
def analyze(
    target: Path = typer.Argument(
        ...,
        exists=True,
        readable=True,
        resolve_path=True,
        help="Ruby file or directory to analyze.",
    ),
    output_format: OutputFormat = typer.Option(OutputFormat.text, "--format", "-f", help="Output format."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show remediation hints."),
    disable: Optional[List[str]] = typer.Option(None, "--disable", "-d", help="Rule id to disable (repeatable)."),
    jobs: int = typer.Option(1, "--jobs", "-j", min=1, help="Files analyzed in parallel."),
    log_level: str = typer.Option("WARNING", "--log-level", help="DEBUG, INFO, WARNING or ERROR."),
) -> None:
    """
    Analyze a single Ruby file or all Ruby files under a directory.
    """
    _configure_logging(log_level)

    config: Config = get_default_config()
    config.disabled_rules.update(disable or [])
    try:
        registry = build_registry(config)
    except ConfigurationError as exc:
        raise typer.BadParameter(str(exc)) from exc

    if not len(registry):
        typer.echo("No rules are enabled in the current configuration.")
        raise typer.Exit(code=1)

    files = _collect_ruby_files(target)
    results = analyze_files(files, registry, jobs=jobs)

    offenses: List[Offense] = [o for r in results for o in r.offenses]
    analyzed = [r.path for r in results if r.error is None]
    failed = [r for r in results if r.error is not None]
    aborted = {r.path: r.error for r in failed}

    if output_format is OutputFormat.json:
        typer.echo(render_json(offenses, analyzed, aborted))
    else:
        print_offenses(offenses, analyzed_files=analyzed, verbose=verbose, aborted=aborted)
        for r in failed:
            typer.echo(f"{r.path}: analysis aborted: {r.error}", err=True)

    if offenses or failed:
        raise typer.Exit(code=1)


@app.command("rules")
def list_rules() -> None:
    """List the available rules with their default severity and safety."""
    config = get_default_config()
    table = Table(box=box.SIMPLE, header_style="bold magenta")
    table.add_column("Rule", no_wrap=True)
    table.add_column("Name")
    table.add_column("Severity")
    table.add_column("Safe")
    for rule in config.rules:
        table.add_row(rule.id, rule.name, rule.severity, "yes" if rule.safe else "no")
    Console().print(table)


def main() -> None:
    """Entry point for `python -m stalecop.main` and the stalecop script."""
    app()


if __name__ == "__main__":
    main()
