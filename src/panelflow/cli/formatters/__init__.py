"""Output formatters for the PanelFlow CLI."""

from panelflow.cli.formatters.base import OutputFormat, OutputFormatter
from panelflow.cli.formatters.json_formatter import JsonFormatter, to_jsonable
from panelflow.cli.formatters.table_formatter import TableFormatter

__all__ = [
    "JsonFormatter",
    "OutputFormat",
    "OutputFormatter",
    "TableFormatter",
    "to_jsonable",
]
