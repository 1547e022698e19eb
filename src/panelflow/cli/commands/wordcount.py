"""CLI command for panelflow wordcount."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from panelflow.cli.utils.cli_handler import CLIHandler
from panelflow.config import get_settings
from panelflow.exceptions import ValidationError
from panelflow.formatting.markdown import (
    WordCountSeverity,
    get_word_count_severity,
    parse_markdown,
)

console = Console()

_SEVERITY_STYLES = {
    WordCountSeverity.OK: "green",
    WordCountSeverity.WARNING: "yellow",
    WordCountSeverity.ERROR: "red",
}


def wordcount_command(
    script: Annotated[
        Path | None, typer.Argument(help="File holding balloon or caption text")
    ] = None,
    text: Annotated[
        str | None, typer.Option("--text", "-t", help="Text to count instead of a file")
    ] = None,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Count the words in balloon text, ignoring emphasis markers."""
    handler = CLIHandler(console)
    settings = get_settings()

    try:
        if text is None and script is None:
            raise ValidationError(
                message="Nothing to count",
                hint="Pass a file or use --text",
            )
        if text is not None and script is not None:
            raise ValidationError(
                message="Pass either a file or --text, not both",
            )
        content = text if text is not None else handler.read_script(script)
    except Exception as e:
        handler.handle_error(e, json_output)
        return

    parsed = parse_markdown(content)
    severity = get_word_count_severity(
        parsed.word_count,
        warning=settings.word_count_warning,
        error=settings.word_count_error,
    )

    if json_output:
        handler.print_json(
            {
                "word_count": parsed.word_count,
                "severity": severity.value,
                "warning_threshold": settings.word_count_warning,
                "error_threshold": settings.word_count_error,
                "plain_text": parsed.plain_text,
            }
        )
        return

    style = _SEVERITY_STYLES[severity]
    console.print(f"Words: [{style}]{parsed.word_count}[/{style}] ({severity.value})")
