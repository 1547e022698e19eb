"""CLI command for panelflow act-breaks."""

from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console

from panelflow.cli.formatters.base import OutputFormat
from panelflow.cli.formatters.table_formatter import TableFormatter
from panelflow.cli.utils.cli_handler import CLIHandler
from panelflow.parser.structure_detector import suggest_act_breaks

console = Console()


def act_breaks_command(
    page_count: Annotated[
        int, typer.Argument(help="Number of pages in the issue", min=0)
    ],
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
    csv: Annotated[bool, typer.Option("--csv", help="Output as CSV")] = False,
    markdown: Annotated[
        bool, typer.Option("--markdown", help="Output as a Markdown table")
    ] = False,
) -> None:
    """Suggest act page ranges for an issue with no act markers."""
    handler = CLIHandler(console)
    output_format = handler.get_output_format(
        json=json_output, csv=csv, markdown=markdown
    )

    breaks = suggest_act_breaks(page_count)

    if output_format == OutputFormat.JSON:
        handler.print_json(breaks)
        return

    rows = [
        {"act": item.act, "start_page": item.start_page, "end_page": item.end_page}
        for item in breaks
    ]
    TableFormatter(console, title=f"Act breaks for {page_count} pages").emit(
        rows, output_format
    )
