"""The ``panelflow`` command and its global options."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Any

import typer
from pydantic import ValidationError as PydanticValidationError
from rich.console import Console

from panelflow import __version__
from panelflow.cli.commands import (
    act_breaks_command,
    diff_command,
    formats_command,
    pacing_command,
    rhythm_command,
    scenes_command,
    structure_command,
    wordcount_command,
)
from panelflow.cli.utils.cli_handler import CLIHandler
from panelflow.config import (
    PanelFlowSettings,
    configure_logging,
    get_logger,
    get_settings,
    get_settings_for_cli,
    set_settings,
)
from panelflow.exceptions import ConfigurationError, PanelFlowError

logger = get_logger(__name__)
console = Console()

app = typer.Typer(
    name="panelflow",
    help="Tools for comic scripts: import, structure, versions and pacing",
    pretty_exceptions_enable=False,
    add_completion=False,
    rich_markup_mode="rich",
)

app.command(name="structure")(structure_command)
app.command(name="formats")(formats_command)
app.command(name="act-breaks")(act_breaks_command)
app.command(name="wordcount")(wordcount_command)
app.command(name="diff")(diff_command)
app.command(name="pacing")(pacing_command)
app.command(name="rhythm")(rhythm_command)
app.command(name="scenes")(scenes_command)


def settings_summary(settings: PanelFlowSettings) -> dict[str, Any]:
    """Version plus the settings a user is likely to tune."""
    summary: dict[str, Any] = {"version": __version__}
    summary.update(
        settings.model_dump(
            mode="json",
            include={
                "log_level",
                "log_format",
                "log_file",
                "diff_max_cells",
                "word_count_warning",
                "word_count_error",
            },
        )
    )
    return summary


@app.command()
def status(
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Show the version and the settings in effect."""
    summary = settings_summary(get_settings())

    if json_output:
        CLIHandler(console).print_json(summary)
        return

    console.print("[bold cyan]PanelFlow Status[/bold cyan]\n")
    for key, value in summary.items():
        console.print(f"  {key.replace('_', ' ').title()}: {value}")


def _log_overrides(verbose: bool, debug: bool) -> dict[str, Any]:
    if debug:
        return {"debug": True, "log_level": "DEBUG"}
    if verbose:
        return {"log_level": "INFO"}
    return {}


@app.callback()
def main_callback(
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Config file (YAML, TOML or JSON) instead of the default search",
            envvar="PANELFLOW_CONFIG",
        ),
    ] = None,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Log at INFO level")
    ] = False,
    debug: Annotated[
        bool, typer.Option("--debug", help="Log at DEBUG level with call sites")
    ] = False,
) -> None:
    """Load settings for this run when a config file or log flag is given."""
    overrides = _log_overrides(verbose, debug)
    if config is None and not overrides:
        return

    handler = CLIHandler(console)
    try:
        settings = get_settings_for_cli(config_file=config, cli_overrides=overrides)
    except FileNotFoundError as e:
        handler.handle_error(
            ConfigurationError(
                message=str(e),
                hint="Check the --config path or unset PANELFLOW_CONFIG",
            )
        )
        return
    except PydanticValidationError as e:
        handler.handle_error(
            ConfigurationError(
                message=f"Invalid settings in {config}",
                hint="Run 'panelflow status' to see the accepted values",
                details={"errors": e.error_count()},
            )
        )
        return
    except PanelFlowError as e:
        handler.handle_error(e)
        return

    set_settings(settings)
    configure_logging(settings)
    logger.debug("Settings loaded", config=str(config) if config else None)


def main() -> None:
    """Entry point for the ``panelflow`` script."""
    app()


if __name__ == "__main__":
    main()
