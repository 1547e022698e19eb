"""CLI command for panelflow scenes."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from panelflow.analysis.scenes import (
    SceneAnalysis,
    analyze_issue_scenes,
    get_efficiency_label,
)
from panelflow.cli.commands.pacing import print_insights
from panelflow.cli.formatters.table_formatter import TableFormatter
from panelflow.cli.utils.cli_handler import CLIHandler

console = Console()


def _print_scenes(analyses: list[SceneAnalysis], show_insights: bool) -> None:
    TableFormatter(console, title="Scenes").emit(
        [
            {
                "scene": analysis.metrics.scene_name,
                "function": analysis.dramatic_function.label,
                "pages": analysis.metrics.page_count,
                "words_per_page": analysis.metrics.words_per_page,
                "score": analysis.efficiency_score,
                "rating": get_efficiency_label(analysis.efficiency_score),
            }
            for analysis in analyses
        ]
    )

    if not show_insights:
        return
    for analysis in analyses:
        if analysis.insights:
            console.print(f"\n[bold]{analysis.metrics.scene_name}[/bold]")
            print_insights(console, analysis.insights)


def scenes_command(
    issue_file: Annotated[
        Path, typer.Argument(help="JSON act tree or page export of an issue")
    ],
    show_insights: Annotated[
        bool, typer.Option("--insights", help="Show insights for each scene")
    ] = False,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Rate how efficiently each scene uses its pages."""
    handler = CLIHandler(console)

    try:
        analyses = analyze_issue_scenes(handler.read_acts(issue_file))
    except Exception as e:
        handler.handle_error(e, json_output)
        return

    if json_output:
        payload = []
        for analysis in analyses:
            item = analysis.model_dump(mode="json")
            item["efficiency_label"] = get_efficiency_label(analysis.efficiency_score)
            payload.append(item)
        handler.print_json(payload)
        return

    _print_scenes(analyses, show_insights)
