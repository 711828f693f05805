# Rich console output: format offenses for terminal display.

from __future__ import annotations

from pathlib import Path
from typing import Mapping, Optional, Sequence

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from stalecop.errors import RuleExecutionError
from stalecop.findings.models import Offense

# Remediation hints per rule (shown with --verbose)
RULE_REMEDIATIONS: dict[str, str] = {
    "Rails/ModuleLevelRelativeDate": (
        "Wrap the call in a lambda (less_than: -> { Time.zone.now }) "
        "or move it into a method so it is evaluated on every use."
    ),
}

# Severity -> Rich style
SEVERITY_STYLE = {
    "fatal": "bold red",
    "error": "bold red",
    "warning": "bold yellow",
    "convention": "bold blue",
    "refactor": "bold cyan",
    "info": "bold dim",
}

SEVERITY_ORDER = ("fatal", "error", "warning", "convention", "refactor", "info")

DEFAULT_SEVERITY_STYLE = "bold white"


def _severity_style(severity: str) -> str:
    return SEVERITY_STYLE.get(severity.lower(), DEFAULT_SEVERITY_STYLE)


def _get_remediation(offense: Offense) -> Optional[str]:
    return RULE_REMEDIATIONS.get(offense.rule_id)


def _shorten_path(path: str | Path) -> str:
    """Show paths relative to the working directory when they are under it."""
    p = Path(path)
    try:
        return str(p.relative_to(Path.cwd()))
    except ValueError:
        return str(p)


def print_offenses(
    offenses: Sequence[Offense],
    analyzed_files: Sequence[Path] | None = None,
    verbose: bool = False,
    console: Console | None = None,
    aborted: Mapping[Path, RuleExecutionError] | None = None,
) -> None:
    """
    Print offenses grouped by file, coloured by severity, with snippets.
    If verbose, shows remediation hints. If analyzed_files or aborted is
    provided, shows a file-by-file summary table; aborted files are listed
    with the rule that failed, never as clean.
    """
    if console is None:
        console = Console()
    aborted = aborted or {}

    if not offenses and not analyzed_files and not aborted:
        console.print(
            Panel(
                "[green]No offenses found.[/green]",
                title="stalecop",
                border_style="green",
                box=box.ROUNDED,
            )
        )
        return

    if not offenses:
        _print_file_summary_table([], analyzed_files or [], aborted, console)
        _print_summary([], len(aborted), console)
        return

    by_file: dict[str, list[Offense]] = {}
    for o in offenses:
        by_file.setdefault(str(o.location.path), []).append(o)

    for path in sorted(by_file.keys()):
        # offenses already arrive in traversal order, which is source order
        file_offenses = by_file[path]

        console.print()
        console.print(Panel(
            f"[bold cyan]{_shorten_path(path)}[/bold cyan]",
            box=box.SIMPLE_HEAD,
            border_style="blue",
            padding=(0, 1),
        ))

        table = Table(
            show_header=True,
            header_style="bold magenta",
            box=box.SIMPLE,
            padding=(0, 1),
            expand=False,
        )
        table.add_column("Line", justify="right", style="dim", width=5)
        table.add_column("Col", justify="right", style="dim", width=4)
        table.add_column("Severity", width=10)
        table.add_column("Rule", width=32, no_wrap=True)
        table.add_column("Message", style="white")

        for o in file_offenses:
            loc = o.location
            table.add_row(
                str(loc.line),
                str(loc.column),
                Text(o.severity.upper(), style=_severity_style(o.severity)),
                Text(f"[{o.rule_id}]", style="dim"),
                Text(o.message),
            )

        console.print(table)

        # Ruby snippets can contain [...] so they never go through markup
        snippets = [o for o in file_offenses if o.location.snippet]
        if snippets:
            for o in snippets:
                line = Text("  |-- ", style="dim")
                line.append(f"{o.location.line}: {o.location.snippet.strip()}")
                console.print(line)
            console.print()

        if verbose:
            seen_rules: set[str] = set()
            for o in file_offenses:
                if o.rule_id in seen_rules:
                    continue
                seen_rules.add(o.rule_id)
                rem = _get_remediation(o)
                if rem:
                    console.print(f"  [dim]\\[Fix][/dim] {o.rule_id}: {rem}", highlight=False)
            if seen_rules:
                console.print()

    if analyzed_files or aborted:
        _print_file_summary_table(offenses, analyzed_files or [], aborted, console)

    _print_summary(offenses, len(aborted), console)


def _print_file_summary_table(
    offenses: Sequence[Offense],
    analyzed_files: Sequence[Path],
    aborted: Mapping[Path, RuleExecutionError],
    console: Console,
) -> None:
    """Print a table of offending, aborted and clean files."""
    by_path: dict[str, int] = {}
    for o in offenses:
        key = str(o.location.path)
        by_path[key] = by_path.get(key, 0) + 1

    clean_files = [p for p in analyzed_files if str(p) not in by_path]
    offending_files = [p for p in analyzed_files if str(p) in by_path]

    table = Table(
        title="Files Summary",
        show_header=True,
        header_style="bold cyan",
        box=box.ROUNDED,
        padding=(0, 1),
    )
    table.add_column("File", style="white")
    table.add_column("Status", width=10)
    table.add_column("Offenses", justify="right", min_width=8)

    for p in sorted(offending_files, key=str):
        table.add_row(_shorten_path(p), Text("STALE", style="bold red"), str(by_path[str(p)]))
    for p in sorted(aborted, key=str):
        table.add_row(
            _shorten_path(p),
            Text("ABORTED", style="bold magenta"),
            Text(f"{aborted[p].rule_id} at {aborted[p].line}:{aborted[p].column}", style="magenta"),
        )
    for p in sorted(clean_files, key=str):
        table.add_row(_shorten_path(p), Text("OK", style="bold green"), "0")

    console.print()
    console.print(Panel(table, border_style="cyan", box=box.ROUNDED))


def _print_summary(offenses: Sequence[Offense], aborted_count: int, console: Console) -> None:
    """Print a compact count of offenses by severity, plus aborted files."""
    by_severity: dict[str, int] = {}
    for o in offenses:
        s = o.severity.lower()
        by_severity[s] = by_severity.get(s, 0) + 1

    total = len(offenses)
    summary_parts = [f"[bold]{total} offense{'s' if total != 1 else ''}[/bold]"]
    for sev in SEVERITY_ORDER:
        if sev in by_severity:
            summary_parts.append(f"[{_severity_style(sev)}]{by_severity[sev]} {sev}[/]")
    if aborted_count:
        summary_parts.append(f"[bold magenta]{aborted_count} file{'s' if aborted_count != 1 else ''} aborted[/]")

    console.print()
    console.print(
        Panel(
            " | ".join(summary_parts),
            title="Summary",
            border_style="yellow" if total > 0 or aborted_count else "green",
            box=box.ROUNDED,
        )
    )
