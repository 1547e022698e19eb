"""CLI utilities."""

from panelflow.cli.utils.cli_handler import CLIHandler

__all__ = ["CLIHandler"]
