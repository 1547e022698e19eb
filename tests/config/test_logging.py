"""Tests for the logging configuration module."""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

import pytest
from structlog.stdlib import ProcessorFormatter

from panelflow.config import get_logger
from panelflow.config.logging import configure_logging
from panelflow.config.settings import PanelFlowSettings


@pytest.fixture(autouse=True)
def reset_logging_state():
    """Restore the root logger after each test."""
    root_logger = logging.getLogger()
    original_level = root_logger.level
    original_handlers = root_logger.handlers.copy()

    yield

    for handler in root_logger.handlers.copy():
        root_logger.removeHandler(handler)
        if handler not in original_handlers:
            handler.close()
    for handler in original_handlers:
        root_logger.addHandler(handler)
    root_logger.setLevel(original_level)


def make_settings(**overrides) -> PanelFlowSettings:
    return PanelFlowSettings(_env_file=None, **overrides)


class TestConfigureLogging:
    """Test configure_logging."""

    @pytest.mark.parametrize(
        ("level", "expected"),
        [
            ("DEBUG", logging.DEBUG),
            ("info", logging.INFO),
            ("WARNING", logging.WARNING),
            ("ERROR", logging.ERROR),
            ("CRITICAL", logging.CRITICAL),
        ],
    )
    def test_root_level(self, level: str, expected: int) -> None:
        """The root logger follows the configured level."""
        configure_logging(make_settings(log_level=level))
        assert logging.getLogger().level == expected

    def test_console_handler_uses_structlog_formatter(self) -> None:
        """Stdlib records are rendered through structlog."""
        configure_logging(make_settings(log_format="json"))

        handlers = logging.getLogger().handlers
        assert len(handlers) == 1
        assert isinstance(handlers[0].formatter, ProcessorFormatter)

    def test_log_file(self, tmp_path: Path) -> None:
        """A log file adds a rotating handler and creates its directory."""
        log_file = tmp_path / "logs" / "panelflow.log"
        configure_logging(make_settings(log_file=str(log_file)))

        file_handlers = [
            h
            for h in logging.getLogger().handlers
            if isinstance(h, RotatingFileHandler)
        ]
        assert len(file_handlers) == 1
        assert log_file.parent.is_dir()

    def test_invalid_level(self) -> None:
        """Unknown levels that bypass validation are reported."""
        settings = PanelFlowSettings.model_construct(log_level="LOUD")

        with pytest.raises(ValueError, match="Invalid log level 'LOUD'"):
            configure_logging(settings)

    def test_records_reach_caplog(self, caplog: pytest.LogCaptureFixture) -> None:
        """Structlog events are routed through the standard library."""
        configure_logging(make_settings(log_level="INFO"))
        logger = get_logger("panelflow.tests.logging")
        # configure_logging replaces every root handler, caplog's included
        logging.getLogger().addHandler(caplog.handler)

        with caplog.at_level(logging.INFO):
            logger.info("Imported script", pages=3)

        assert "Imported script" in caplog.text


class TestGetLogger:
    """Test the cached logger accessor."""

    def test_cached(self) -> None:
        """The same logger object is returned for a name."""
        assert get_logger("panelflow.a") is get_logger("panelflow.a")

    def test_distinct_names(self) -> None:
        """Different names give different loggers."""
        assert get_logger("panelflow.a") is not get_logger("panelflow.b")
