"""Settings and logging for PanelFlow.

Modules get their logger with ``get_logger(__name__)`` at import time.
Logging is configured from the global settings the first time any logger
is requested, and the CLI reconfigures it when flags change the settings.
"""

from __future__ import annotations

from typing import Any

from panelflow.config import settings as _settings_module
from panelflow.config.logging import configure_logging
from panelflow.config.logging import get_logger as _structlog_logger
from panelflow.config.settings import (
    PanelFlowSettings,
    get_settings,
    get_settings_for_cli,
    set_settings,
)

__all__ = [
    "PanelFlowSettings",
    "configure_logging",
    "get_logger",
    "get_settings",
    "get_settings_for_cli",
    "reset_settings",
    "set_settings",
]

_loggers: dict[str, Any] = {}


def get_logger(name: str) -> Any:
    """Cached structlog logger for ``name``."""
    logger = _loggers.get(name)
    if logger is None:
        if not _loggers:
            configure_logging(get_settings())
        logger = _loggers[name] = _structlog_logger(name)
    return logger


def reset_settings() -> None:
    """Drop the global settings and cached loggers.

    The next ``get_logger`` call reloads settings and configures logging
    again.
    """
    _settings_module.reset_settings()
    _loggers.clear()
