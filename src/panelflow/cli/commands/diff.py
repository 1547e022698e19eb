"""CLI command for panelflow diff."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape

from panelflow.cli.formatters.table_formatter import TableFormatter
from panelflow.cli.utils.cli_handler import CLIHandler
from panelflow.diff.models import ChangeStatus, DiffLineType, DiffResult, PageDiff
from panelflow.diff.version_diff import (
    compare_pages,
    compute_line_diff,
    generate_diff_summary,
)

console = Console()

_LINE_STYLES = {
    DiffLineType.ADDED: ("+", "green"),
    DiffLineType.REMOVED: ("-", "red"),
    DiffLineType.MODIFIED: ("~", "yellow"),
    DiffLineType.UNCHANGED: (" ", "dim"),
}

_STATUS_STYLES = {
    ChangeStatus.NEW: "green",
    ChangeStatus.MODIFIED: "yellow",
    ChangeStatus.REMOVED: "red",
    ChangeStatus.UNCHANGED: "dim",
}


def _print_line_diff(result: DiffResult) -> None:
    for line in result.lines:
        marker, style = _LINE_STYLES[line.type]
        if line.type is DiffLineType.MODIFIED:
            old = escape(line.old_content or "")
            console.print(f"[red]- {old}[/red]", highlight=False)
        console.print(
            f"[{style}]{marker} {escape(line.content)}[/{style}]", highlight=False
        )

    stats = result.stats
    console.print(
        f"\n[green]+{stats.added}[/green] [red]-{stats.removed}[/red] "
        f"[yellow]~{stats.modified}[/yellow] unchanged {stats.unchanged}, "
        f"similarity {result.similarity}%"
    )


def _print_page_diff(diffs: list[PageDiff]) -> None:
    rows = [
        {
            "page": diff.page_number,
            "status": f"[{_STATUS_STYLES[diff.status]}]{diff.status.value}[/]",
            "panels": f"{diff.old_panel_count} -> {diff.new_panel_count}",
            "changed_panels": ", ".join(
                str(panel.panel_number)
                for panel in diff.panels
                if panel.status is not ChangeStatus.UNCHANGED
            ),
        }
        for diff in diffs
    ]
    TableFormatter(console, title="Page changes").emit(rows)
    console.print(generate_diff_summary(diffs))


def diff_command(
    old: Annotated[Path, typer.Argument(help="Previous version")],
    new: Annotated[Path, typer.Argument(help="Current version")],
    pages: Annotated[
        bool,
        typer.Option("--pages", help="Compare JSON page exports instead of text"),
    ] = False,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Compare two versions of a script.

    Text files are compared line by line. With ``--pages`` both files are
    JSON page exports and are compared page by page and panel by panel.
    """
    handler = CLIHandler(console)

    try:
        if pages:
            page_diffs = compare_pages(handler.read_pages(old), handler.read_pages(new))
        else:
            result = compute_line_diff(
                handler.read_script(old), handler.read_script(new)
            )
    except Exception as e:
        handler.handle_error(e, json_output)
        return

    if pages:
        if json_output:
            handler.print_json(
                {"summary": generate_diff_summary(page_diffs), "pages": page_diffs}
            )
        else:
            _print_page_diff(page_diffs)
        return

    if json_output:
        handler.print_json(result)
    else:
        _print_line_diff(result)
