"""Shared pieces of the CLI output formatters."""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Generic, TypeVar

from rich.console import Console

T = TypeVar("T")


class OutputFormat(str, Enum):
    """How a command renders its result."""

    TABLE = "table"
    JSON = "json"
    CSV = "csv"
    MARKDOWN = "markdown"

    @property
    def is_machine_readable(self) -> bool:
        """True for formats that must reach stdout without rich markup."""
        return self is not OutputFormat.TABLE


class OutputFormatter(ABC, Generic[T]):
    """Renders one kind of command result in the supported formats."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    @abstractmethod
    def format(self, data: T, format_type: OutputFormat = OutputFormat.TABLE) -> str:
        """Render ``data`` as a string in ``format_type``."""

    def emit(self, data: T, format_type: OutputFormat = OutputFormat.TABLE) -> None:
        """Render and write ``data``.

        CSV, Markdown and JSON go through plain ``print`` so redirected
        output contains no ANSI escape codes.
        """
        output = self.format(data, format_type)
        if format_type.is_machine_readable:
            print(output)
        else:
            self.console.print(output)
