"""Errors raised at PanelFlow's I/O edges.

The script cores never raise on malformed text. These exceptions are used
where user input enters the toolkit: config files, script files on disk and
JSON page exports. Each carries a hint that the CLI shows next to the
message.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from pydantic import ValidationError as PydanticValidationError


class PanelFlowError(Exception):
    """Base class for errors reported to PanelFlow users.

    Args:
        message: What went wrong, in one line
        hint: How to fix it
        details: Extra facts listed under the message
    """

    def __init__(
        self,
        message: str,
        hint: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.hint = hint
        self.details = details
        super().__init__(self.format_error())

    def format_error(self) -> str:
        """Message, hint and details as multi-line text."""
        lines = [f"Error: {self.message}"]
        if self.hint:
            lines.append(f"Hint: {self.hint}")
        if self.details:
            lines.append("Details:")
            lines.extend(f"  {key}: {value}" for key, value in self.details.items())
        return "\n".join(lines)

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready form used by ``--json`` error output."""
        payload: dict[str, Any] = {"error": self.message}
        if self.hint:
            payload["hint"] = self.hint
        if self.details:
            payload["details"] = self.details
        return payload


class ConfigurationError(PanelFlowError):
    """Invalid settings or an unreadable config file."""


class ParseError(PanelFlowError):
    """Input that cannot be decoded, such as non UTF-8 scripts or broken JSON."""


class ScriptFileNotFoundError(PanelFlowError):
    """A script or page export path that does not name a readable file."""

    def __init__(self, path: Path | str, is_directory: bool = False) -> None:
        self.path = Path(path)
        if is_directory:
            message = f"Not a file: {path}"
            hint = "Pass a script file, not a directory"
        else:
            message = f"Script file not found: {path}"
            hint = "Check the path and try again"
        super().__init__(message=message, hint=hint, details={"path": str(path)})


class ValidationError(PanelFlowError):
    """Input that was read but does not have the expected shape."""


class PageDataError(ValidationError):
    """A page export that does not validate as a list of pages."""

    @classmethod
    def from_pydantic(
        cls, error: PydanticValidationError, source: str
    ) -> PageDataError:
        """Summarize a pydantic error by its first failing location.

        Args:
            error: Error raised while validating the pages
            source: File name the pages came from
        """
        first = error.errors()[0]
        return cls(
            message=f"Invalid page data in {source}",
            hint="Each page needs a page_number and a list of panels",
            details={
                "errors": error.error_count(),
                "location": ".".join(str(part) for part in first["loc"]),
                "reason": first["msg"],
            },
        )


# Shortened keys people write by hand, mapped to the real setting names.
_KEY_CORRECTIONS = {
    "level": "log_level",
    "format": "log_format",
    "max_cells": "diff_max_cells",
    "word_warning": "word_count_warning",
    "word_error": "word_count_error",
}


def check_config_keys(config: dict[str, Any]) -> None:
    """Reject config files that use a shortened key name.

    Raises:
        ConfigurationError: Naming the key to use instead
    """
    for wrong, correct in _KEY_CORRECTIONS.items():
        if wrong in config:
            raise ConfigurationError(
                message=f"Invalid configuration key '{wrong}'",
                hint=f"Use '{correct}' instead of '{wrong}'",
                details={
                    "found_keys": list(config),
                    "invalid_key": wrong,
                    "correct_key": correct,
                },
            )
