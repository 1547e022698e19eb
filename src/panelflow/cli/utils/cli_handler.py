"""Unified CLI handler for standardized error handling, input and output."""

import json
from pathlib import Path
from typing import Any

import typer
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from rich.console import Console

from panelflow.cli.formatters.base import OutputFormat
from panelflow.cli.formatters.json_formatter import JsonFormatter
from panelflow.config import get_logger
from panelflow.exceptions import (
    PageDataError,
    PanelFlowError,
    ParseError,
    ScriptFileNotFoundError,
    ValidationError,
)
from panelflow.models import ActData, PageData

logger = get_logger(__name__)

_PAGES_ADAPTER = TypeAdapter(list[PageData])
_ACTS_ADAPTER = TypeAdapter(list[ActData])


class CLIHandler:
    """Unified handler for CLI commands."""

    def __init__(self, console: Console | None = None) -> None:
        """Initialize CLI handler.

        Args:
            console: Rich console for output
        """
        self.console = console or Console()
        self.json_formatter = JsonFormatter()

    def handle_error(
        self, error: Exception, json_output: bool = False, exit_code: int = 1
    ) -> None:
        """Handle and display errors consistently.

        Args:
            error: Exception to handle
            json_output: Whether to output JSON
            exit_code: Exit code to use

        Raises:
            typer.Exit: Always, with ``exit_code``
        """
        logger.error(
            "Command failed", error=str(error), error_type=type(error).__name__
        )

        if json_output:
            print(self.json_formatter.format_error_response(error, exit_code))
        elif isinstance(error, ValidationError):
            self.console.print(f"[red]Validation {error.format_error()}[/red]")
        elif isinstance(error, PanelFlowError):
            self.console.print(f"[red]{error.format_error()}[/red]")
        else:
            self.console.print(f"[red]Error: {error}[/red]")

        raise typer.Exit(exit_code)

    def print_json(self, data: Any) -> None:
        """Print pure JSON without ANSI escape codes."""
        print(self.json_formatter.format(data))

    def get_output_format(
        self, json: bool = False, csv: bool = False, markdown: bool = False
    ) -> OutputFormat:
        """Determine output format from flags.

        Args:
            json: JSON output flag
            csv: CSV output flag
            markdown: Markdown output flag

        Returns:
            Selected output format, a table when no flag is set
        """
        if json:
            return OutputFormat.JSON
        if csv:
            return OutputFormat.CSV
        if markdown:
            return OutputFormat.MARKDOWN
        return OutputFormat.TABLE

    def read_script(self, path: Path) -> str:
        """Read a script file as UTF-8 text.

        Args:
            path: Script file path

        Returns:
            File contents

        Raises:
            ScriptFileNotFoundError: If the path does not exist or is not a file
            ParseError: If the file cannot be decoded as UTF-8
        """
        if not path.exists():
            raise ScriptFileNotFoundError(path)
        if not path.is_file():
            raise ScriptFileNotFoundError(path, is_directory=True)
        try:
            return path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise ParseError(
                message=f"Could not decode {path.name} as UTF-8",
                hint="Save the script as UTF-8 text",
                details={"path": str(path), "position": e.start},
            ) from e

    def read_pages(self, path: Path) -> list[PageData]:
        """Read page snapshots from a JSON file.

        The file may hold a list of pages or an object with a ``pages`` list.

        Raises:
            ParseError: If the file is not valid JSON
            PageDataError: If the JSON does not describe pages
        """
        text = self.read_script(path)
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as e:
            raise ParseError(
                message=f"Invalid JSON in {path.name}",
                hint="Page files must be JSON exported from PanelFlow",
                details={"line": e.lineno, "column": e.colno},
            ) from e

        if isinstance(payload, dict) and "pages" in payload:
            payload = payload["pages"]

        try:
            return _PAGES_ADAPTER.validate_python(payload)
        except PydanticValidationError as e:
            raise PageDataError.from_pydantic(e, path.name) from e

    def read_acts(self, path: Path) -> list[ActData]:
        """Read an act > scene > page tree from a JSON file.

        The file may hold a list of acts or an object with an ``acts`` list.
        A plain page export becomes one act with one scene.

        Raises:
            ParseError: If the file is not valid JSON
            PageDataError: If the JSON does not describe acts or pages
        """
        text = self.read_script(path)
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as e:
            raise ParseError(
                message=f"Invalid JSON in {path.name}",
                hint="Act files must be JSON exported from PanelFlow",
                details={"line": e.lineno, "column": e.colno},
            ) from e

        if isinstance(payload, dict) and "acts" in payload:
            payload = payload["acts"]
        elif isinstance(payload, dict) and "pages" in payload:
            payload = [{"scenes": [{"pages": payload["pages"]}]}]
        elif isinstance(payload, list) and all(
            isinstance(item, dict) and "scenes" not in item for item in payload
        ):
            payload = [{"scenes": [{"pages": payload}]}]

        try:
            return _ACTS_ADAPTER.validate_python(payload)
        except PydanticValidationError as e:
            raise PageDataError.from_pydantic(e, path.name) from e
