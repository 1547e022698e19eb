"""CLI test fixtures and helpers for ANSI-free output checks."""

import json
import re
from collections.abc import Callable
from typing import Any

import pytest
from typer.testing import CliRunner, Result

from panelflow.cli.main import app

_ANSI_ESCAPE = re.compile(r"\x1b\[[0-9;]*[A-Za-z]")


def strip_ansi_codes(text: str) -> str:
    """Strip ANSI escape sequences from CLI output.

    Args:
        text: Text potentially containing ANSI escape codes

    Returns:
        Text with all ANSI escape sequences removed
    """
    return _ANSI_ESCAPE.sub("", text)


def parse_json_output(result: Result) -> Any:
    """Parse a command's stdout as JSON, failing with the raw output."""
    try:
        return json.loads(result.stdout)
    except json.JSONDecodeError as e:
        raise AssertionError(
            f"Failed to parse output as JSON: {e}\nOutput: {result.output}"
        ) from e


@pytest.fixture
def runner() -> CliRunner:
    """Typer CLI runner."""
    return CliRunner()


@pytest.fixture
def cli_invoke(runner: CliRunner) -> Callable[..., Result]:
    """Invoke the panelflow app with string arguments."""

    def invoke(*args: str) -> Result:
        return runner.invoke(app, [str(arg) for arg in args])

    return invoke
