"""CLI command for panelflow pacing."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from panelflow.analysis.pacing import (
    InsightSeverity,
    InsightType,
    PacingAnalysis,
    PacingInsight,
    analyze_pacing,
    get_score_label,
)
from panelflow.cli.formatters.table_formatter import TableFormatter
from panelflow.cli.utils.cli_handler import CLIHandler

console = Console()

_INSIGHT_STYLES = {
    InsightType.WARNING: "red",
    InsightType.SUGGESTION: "yellow",
    InsightType.STRENGTH: "green",
}


def print_insights(console: Console, insights: Iterable[PacingInsight]) -> None:
    """Print insights colored by type, marking high severity with "!"."""
    for insight in insights:
        style = _INSIGHT_STYLES[insight.type]
        bullet = "!" if insight.severity is InsightSeverity.HIGH else "-"
        pages = ""
        if insight.pages:
            pages = f" (pages {', '.join(map(str, insight.pages))})"
        console.print(f"[{style}]{bullet} {insight.message}{pages}[/{style}]")
        if insight.suggestion:
            console.print(f"  [dim]{insight.suggestion}[/dim]")


def _print_analysis(analysis: PacingAnalysis, show_pages: bool) -> None:
    overall = analysis.overall
    label = get_score_label(analysis.score)
    console.print(f"[bold]Pacing score: {analysis.score}[/bold] ({label})")
    console.print(
        f"{overall.total_pages} pages, {overall.total_panels} panels, "
        f"{overall.total_words} words"
    )
    console.print(
        f"Avg {overall.avg_words_per_page:g} words/page, "
        f"{overall.avg_panels_per_page:g} panels/page, "
        f"{overall.avg_words_per_panel:g} words/panel"
    )

    if show_pages:
        TableFormatter(console, title="Pages").emit(
            [
                {
                    "page": metric.page_number,
                    "panels": metric.panel_count,
                    "words": metric.word_count,
                    "words_per_panel": metric.words_per_panel,
                    "warnings": "; ".join(metric.warnings),
                }
                for metric in analysis.pages
            ]
        )

    print_insights(console, analysis.insights)


def pacing_command(
    pages_file: Annotated[Path, typer.Argument(help="JSON page export of an issue")],
    show_pages: Annotated[
        bool, typer.Option("--pages", help="Show per-page metrics")
    ] = False,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Analyze the pacing of an issue from its page export."""
    handler = CLIHandler(console)

    try:
        analysis = analyze_pacing(handler.read_pages(pages_file))
    except Exception as e:
        handler.handle_error(e, json_output)
        return

    if json_output:
        payload = analysis.model_dump(mode="json")
        payload["label"] = get_score_label(analysis.score)
        handler.print_json(payload)
        return

    _print_analysis(analysis, show_pages)
