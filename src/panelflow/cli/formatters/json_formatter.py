"""JSON output formatter for CLI."""

from __future__ import annotations

import dataclasses
import json
from typing import Any

from panelflow.cli.formatters.base import OutputFormat, OutputFormatter
from panelflow.exceptions import PanelFlowError


def to_jsonable(data: Any) -> Any:
    """Convert pydantic models and dataclasses into plain JSON data."""
    if hasattr(data, "model_dump"):
        return data.model_dump(mode="json")
    if dataclasses.is_dataclass(data) and not isinstance(data, type):
        return dataclasses.asdict(data)
    if isinstance(data, list | tuple):
        return [to_jsonable(item) for item in data]
    if isinstance(data, dict):
        return {key: to_jsonable(value) for key, value in data.items()}
    return data


class JsonFormatter(OutputFormatter[Any]):
    """Generic JSON formatter for CLI output."""

    def format(self, data: Any, format_type: OutputFormat = OutputFormat.JSON) -> str:  # noqa: ARG002
        """Format data as JSON.

        Args:
            data: Data to format
            format_type: Output format type (ignored, always JSON)

        Returns:
            JSON string
        """
        payload = to_jsonable(data)
        if not isinstance(payload, dict | list):
            payload = {"value": payload}
        return json.dumps(payload, default=str, indent=2)

    def format_error_response(self, error: str | Exception, code: int = 1) -> str:
        """Format an error response.

        Args:
            error: Error message or exception
            code: Error code

        Returns:
            JSON string
        """
        response: dict[str, Any] = {"success": False, "code": code}
        if isinstance(error, PanelFlowError):
            response.update(error.to_dict())
        else:
            response["error"] = str(error)
        return json.dumps(response, default=str, indent=2)
