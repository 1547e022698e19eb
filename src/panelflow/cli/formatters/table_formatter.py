"""Row-oriented output for acts, formats, page diffs and pacing metrics."""

import csv
import io
from typing import Any

from rich.console import Console
from rich.table import Table

from panelflow.cli.formatters.base import OutputFormat, OutputFormatter

Rows = list[dict[str, Any]]

EMPTY_MESSAGE = "No data to display"


def column_title(key: str) -> str:
    """``start_page`` -> ``Start Page``."""
    return key.replace("_", " ").title()


class TableFormatter(OutputFormatter[Rows]):
    """Renders a list of rows, one column per key of the first row."""

    def __init__(self, console: Console | None = None, title: str | None = None):
        super().__init__(console)
        self.title = title

    def format(self, data: Rows, format_type: OutputFormat = OutputFormat.TABLE) -> str:
        """Render rows as a rich table, CSV or a Markdown table.

        Args:
            data: Rows sharing the keys of the first row
            format_type: Target format; JSON is not handled here

        Returns:
            Rendered rows, or a short notice when there are none
        """
        if not data:
            return EMPTY_MESSAGE

        columns = list(data[0])
        if format_type == OutputFormat.CSV:
            buffer = io.StringIO()
            writer = csv.DictWriter(buffer, fieldnames=columns)
            writer.writeheader()
            writer.writerows(data)
            return buffer.getvalue()

        if format_type == OutputFormat.MARKDOWN:
            header = [column_title(col) for col in columns]
            lines = [
                "| " + " | ".join(header) + " |",
                "| " + " | ".join("---" for _ in columns) + " |",
            ]
            lines.extend(
                "| " + " | ".join(str(row.get(col, "")) for col in columns) + " |"
                for row in data
            )
            return "\n".join(lines)

        buffer = io.StringIO()
        Console(file=buffer, force_terminal=False, width=120).print(
            self.build_table(data)
        )
        return buffer.getvalue()

    def build_table(self, data: Rows) -> Table:
        """Build the rich table for ``data``; cells may contain markup."""
        table = Table(title=self.title, show_header=True, header_style="bold magenta")
        columns = list(data[0]) if data else []
        for col in columns:
            table.add_column(column_title(col))
        for row in data:
            table.add_row(*(str(row.get(col, "")) for col in columns))
        return table

    def emit(self, data: Rows, format_type: OutputFormat = OutputFormat.TABLE) -> None:
        """Write rows; tables go to the console so they keep their styling."""
        if format_type != OutputFormat.TABLE:
            super().emit(data, format_type)
        elif not data:
            self.console.print(f"[yellow]{EMPTY_MESSAGE}[/yellow]")
        else:
            self.console.print(self.build_table(data))
