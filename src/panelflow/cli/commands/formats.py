"""CLI command for panelflow formats."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from panelflow.cli.formatters.base import OutputFormat
from panelflow.cli.formatters.table_formatter import TableFormatter
from panelflow.cli.utils.cli_handler import CLIHandler
from panelflow.parser.format_detector import (
    detect_script_format,
    extract_pages_with_format,
    get_confidence_label,
)

console = Console()


def formats_command(
    script: Annotated[Path, typer.Argument(help="Path to the comic script")],
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
    csv: Annotated[bool, typer.Option("--csv", help="Output as CSV")] = False,
    markdown: Annotated[
        bool, typer.Option("--markdown", help="Output as a Markdown table")
    ] = False,
    pages: Annotated[
        bool,
        typer.Option("--pages", help="List the pages split out by the best format"),
    ] = False,
) -> None:
    """Detect which page and panel marker convention a script uses."""
    handler = CLIHandler(console)
    output_format = handler.get_output_format(
        json=json_output, csv=csv, markdown=markdown
    )

    try:
        text = handler.read_script(script)
        detected = detect_script_format(text)
    except Exception as e:
        handler.handle_error(e, json_output)
        return

    rows = [
        {
            "format": item.pattern.name,
            "description": item.pattern.description,
            "confidence": item.confidence,
            "label": get_confidence_label(item.confidence),
            "pages": item.page_matches,
            "panels": item.panel_matches,
        }
        for item in detected
    ]

    extracted = []
    if pages and detected:
        extracted = [
            {
                "page_number": page.page_number,
                "start_line": page.start_line + 1,
                "panels": page.panel_count,
            }
            for page in extract_pages_with_format(text, detected[0].pattern)
        ]

    if output_format == OutputFormat.JSON:
        payload: dict[str, object] = {"formats": rows}
        if pages:
            payload["pages"] = extracted
        handler.print_json(payload)
        return

    if not rows:
        console.print("[yellow]No page markers recognized[/yellow]")
        return

    TableFormatter(console, title="Detected formats").emit(rows, output_format)
    if pages:
        if output_format.is_machine_readable:
            print()
        TableFormatter(console, title=f"Pages ({rows[0]['format']})").emit(
            extracted, output_format
        )
