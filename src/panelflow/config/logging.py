"""Structlog setup for PanelFlow.

Everything is routed through the standard library so that ``--log-file``
and pytest's ``caplog`` see the same records as the console. Three output
styles are supported: ``console`` (coloured, rich tracebacks), ``json``
(one object per line) and ``structured`` (``key=value`` pairs).
"""

from __future__ import annotations

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

import structlog
from structlog.contextvars import merge_contextvars
from structlog.processors import (
    CallsiteParameter,
    CallsiteParameterAdder,
    TimeStamper,
    add_log_level,
    dict_tracebacks,
    format_exc_info,
)
from structlog.stdlib import (
    ProcessorFormatter,
    add_logger_name,
    filter_by_level,
    render_to_log_kwargs,
)

from panelflow.config.settings import PanelFlowSettings

LOG_FILE_MAX_BYTES = 5 * 1024 * 1024
LOG_FILE_BACKUPS = 3

_KEY_ORDER = ["timestamp", "level", "logger", "event"]


def resolve_log_level(name: str) -> int:
    """Map a level name such as ``info`` to its numeric value.

    Raises:
        ValueError: If the name is not a standard logging level
    """
    level = logging.getLevelNamesMapping().get(name.upper())
    if level is None:
        known = sorted(logging.getLevelNamesMapping())
        raise ValueError(
            f"Invalid log level '{name}'. Valid levels are: {', '.join(known)}"
        )
    return level


def _renderer(log_format: str) -> Any:
    if log_format == "json":
        return structlog.processors.JSONRenderer()
    if log_format == "structured":
        return structlog.processors.KeyValueRenderer(
            key_order=_KEY_ORDER, drop_missing=True
        )
    return structlog.dev.ConsoleRenderer(
        colors=sys.stderr.isatty(),
        exception_formatter=structlog.dev.rich_traceback,
    )


def _routes_through_stdlib(log_format: str) -> bool:
    # caplog only captures records that reach a stdlib handler
    running_tests = "pytest" in sys.modules or "PYTEST_CURRENT_TEST" in os.environ
    return running_tests or log_format != "console"


def _handlers(settings: PanelFlowSettings, level: int) -> list[logging.Handler]:
    """Stderr handler plus a rotating file handler when a log file is set."""
    formatter = ProcessorFormatter(
        processor=_renderer(settings.log_format),
        foreign_pre_chain=[TimeStamper(fmt="iso"), add_log_level, add_logger_name],
    )

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if settings.log_file:
        log_path = Path(settings.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            RotatingFileHandler(
                log_path,
                maxBytes=LOG_FILE_MAX_BYTES,
                backupCount=LOG_FILE_BACKUPS,
                encoding="utf-8",
            )
        )

    for handler in handlers:
        handler.setFormatter(formatter)
        handler.setLevel(level)
    return handlers


def _processors(settings: PanelFlowSettings) -> list[Any]:
    processors: list[Any] = [
        merge_contextvars,
        filter_by_level,
        TimeStamper(fmt="iso"),
        add_log_level,
        dict_tracebacks,
    ]
    if settings.debug:
        processors.append(
            CallsiteParameterAdder(
                parameters=[
                    CallsiteParameter.FILENAME,
                    CallsiteParameter.LINENO,
                    CallsiteParameter.FUNC_NAME,
                ]
            )
        )

    processors.append(format_exc_info)
    if _routes_through_stdlib(settings.log_format):
        processors.extend([render_to_log_kwargs, ProcessorFormatter.wrap_for_formatter])
    else:
        processors.append(_renderer(settings.log_format))
    return processors


def configure_logging(settings: PanelFlowSettings) -> None:
    """Install handlers on the root logger and configure structlog.

    Calling this again replaces the previous handlers.

    Raises:
        ValueError: If ``settings.log_level`` is not a logging level
    """
    level = resolve_log_level(settings.log_level)

    logging.basicConfig(level=level, handlers=_handlers(settings, level), force=True)
    logging.getLogger().setLevel(level)

    structlog.configure(
        processors=_processors(settings),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> Any:
    """Return the structlog logger for ``name`` without configuring anything."""
    return structlog.get_logger(name)
