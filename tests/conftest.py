"""Pytest configuration and fixtures."""

import os

import pytest

from panelflow.config import PanelFlowSettings, reset_settings, set_settings

# Import CLI fixtures to make them available globally
from tests.cli_fixtures import cli_invoke, runner  # noqa: F401


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers",
        "integration: mark test as integration test",
    )
    config.addinivalue_line(
        "markers",
        "unit: mark test as unit test",
    )


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    """Run every test with default settings, unaffected by the environment.

    User config files and PANELFLOW_ variables on the developer machine
    would otherwise leak into assertions about defaults.
    """
    for var in [k for k in os.environ if k.startswith("PANELFLOW_")]:
        monkeypatch.delenv(var)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))

    set_settings(PanelFlowSettings(_env_file=None))

    yield

    reset_settings()


@pytest.fixture
def acts_and_scenes_script() -> str:
    """A short script with explicit acts, scenes and pages."""
    return "\n".join(
        [
            "ACT ONE",
            "SCENE 1: THE ROOFTOP",
            "PAGE 1",
            "PANEL 1",
            "Rain over the city.",
            "PAGE 2",
            "PANEL 1",
            "ACT TWO",
            "INT. WAREHOUSE - NIGHT",
            "PAGE 3",
            "PANEL 1",
            "The crates are empty.",
        ]
    )


@pytest.fixture
def flat_script() -> str:
    """A script with page markers only."""
    return "\n".join(
        [
            "PAGE 1",
            "PANEL 1",
            "A quiet street.",
            "PAGE 2",
            "PANEL 1",
            "The same street, now burning.",
        ]
    )
