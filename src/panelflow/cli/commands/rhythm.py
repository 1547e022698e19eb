"""CLI command for panelflow rhythm."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from panelflow.analysis.rhythm import (
    IssueRhythm,
    analyze_issue_rhythm,
    get_tempo_label,
)
from panelflow.cli.commands.pacing import print_insights
from panelflow.cli.formatters.table_formatter import TableFormatter
from panelflow.cli.utils.cli_handler import CLIHandler

console = Console()


def _print_rhythm(rhythm: IssueRhythm, show_pages: bool) -> None:
    console.print(f"[bold]Tempo: {get_tempo_label(rhythm.tempo)}[/bold]")
    console.print(
        f"{len(rhythm.pages)} pages, avg {rhythm.avg_panels_per_page:g} panels/page"
    )
    console.print(
        f"Silent {rhythm.silent_ratio:.0%}, dialogue {rhythm.dialogue_ratio:.0%}, "
        f"action {rhythm.action_ratio:.0%}"
    )

    if show_pages:
        TableFormatter(console, title="Pages").emit(
            [
                {
                    "page": page.page_number,
                    "type": page.page_type.value,
                    "panels": page.panel_count,
                    "words": page.word_count,
                    "silent": page.silent_panels,
                    "action": page.action_panels,
                    "density": page.density.value,
                }
                for page in rhythm.pages
            ]
        )

    print_insights(console, rhythm.insights)


def rhythm_command(
    issue_file: Annotated[
        Path, typer.Argument(help="JSON act tree or page export of an issue")
    ],
    show_pages: Annotated[
        bool, typer.Option("--pages", help="Show per-page rhythm")
    ] = False,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Analyze the visual rhythm of an issue."""
    handler = CLIHandler(console)

    try:
        rhythm = analyze_issue_rhythm(handler.read_acts(issue_file))
    except Exception as e:
        handler.handle_error(e, json_output)
        return

    if json_output:
        payload = rhythm.model_dump(mode="json")
        payload["tempo_label"] = get_tempo_label(rhythm.tempo)
        handler.print_json(payload)
        return

    _print_rhythm(rhythm, show_pages)
