"""Settings for the PanelFlow toolkit and CLI.

Values are resolved from, highest precedence first: command-line flags,
config files, ``PANELFLOW_*`` environment variables, a ``.env`` file and
the field defaults below. Config files are searched in
``~/.config/panelflow/`` and then in the working directory, so project
files override user files.
"""

from __future__ import annotations

import json
import os
import tomllib
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import Field, ValidationInfo, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from panelflow.exceptions import ConfigurationError, check_config_keys

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
LogFormat = Literal["console", "json", "structured"]


def _load_yaml(path: Path) -> dict[str, Any]:
    with path.open(encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def _load_toml(path: Path) -> dict[str, Any]:
    with path.open("rb") as f:
        return tomllib.load(f)


def _load_json(path: Path) -> dict[str, Any]:
    with path.open(encoding="utf-8") as f:
        return json.load(f)


CONFIG_LOADERS: dict[str, Callable[[Path], dict[str, Any]]] = {
    ".yaml": _load_yaml,
    ".yml": _load_yaml,
    ".toml": _load_toml,
    ".json": _load_json,
}


def read_config_file(path: Path | str) -> dict[str, Any]:
    """Read the raw key/value pairs of a config file.

    Raises:
        FileNotFoundError: If the file does not exist
        ConfigurationError: For unknown extensions or misspelled keys
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    suffix = path.suffix.lower()
    loader = CONFIG_LOADERS.get(suffix)
    if loader is None:
        supported = ", ".join(sorted(CONFIG_LOADERS))
        raise ConfigurationError(
            message=f"Unsupported configuration file format: {suffix or path.name}",
            hint=f"Rename the file to one of: {supported}",
            details={"file": str(path)},
        )

    try:
        data = loader(path)
    except (yaml.YAMLError, tomllib.TOMLDecodeError, json.JSONDecodeError) as e:
        raise ConfigurationError(
            message=f"Could not parse {path.name}",
            hint="Check the file syntax",
            details={"file": str(path), "reason": str(e)},
        ) from e
    check_config_keys(data)
    return data


class PanelFlowSettings(BaseSettings):
    """Logging, diff and word count settings shared by every command."""

    model_config = SettingsConfigDict(
        env_prefix="PANELFLOW_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    debug: bool = Field(default=False, description="Add call sites to log events")

    log_level: LogLevel = Field(default="WARNING", description="Minimum log level")
    log_format: LogFormat = Field(default="console", description="Log renderer")
    log_file: Path | None = Field(
        default=None, description="Also write logs to this file, rotated"
    )

    diff_max_cells: int = Field(
        default=4_000_000,
        ge=1,
        description="Warn when a line diff needs more LCS cells than this",
    )

    word_count_warning: int = Field(
        default=25, ge=1, description="Panel words that trigger a warning"
    )
    word_count_error: int = Field(
        default=35, ge=1, description="Panel words that trigger an error"
    )

    @field_validator("log_level", "log_format", mode="before")
    @classmethod
    def normalize_case(cls, v: Any, info: ValidationInfo) -> Any:
        """Accept level and format names in any case."""
        if not isinstance(v, str):
            return v
        return v.upper() if info.field_name == "log_level" else v.lower()

    @field_validator("log_file", mode="before")
    @classmethod
    def expand_log_file(cls, v: Any) -> Any:
        """Expand ``~`` and ``$VARS`` and make the path absolute."""
        if isinstance(v, str):
            v = Path(os.path.expandvars(v)).expanduser()
        if isinstance(v, Path):
            return v.resolve()
        return v

    @model_validator(mode="after")
    def check_word_count_thresholds(self) -> PanelFlowSettings:
        if self.word_count_error < self.word_count_warning:
            raise ValueError("word_count_error must be >= word_count_warning")
        return self

    @classmethod
    def from_file(cls, config_path: Path | str) -> PanelFlowSettings:
        """Settings from one YAML, TOML or JSON file, over env and defaults.

        Raises:
            FileNotFoundError: If the file does not exist
            ConfigurationError: For unknown extensions or misspelled keys
        """
        return cls(**read_config_file(config_path))

    @classmethod
    def from_multiple_sources(
        cls,
        config_files: Sequence[Path | str] | None = None,
        env_file: Path | str | None = None,
        cli_args: dict[str, Any] | None = None,
    ) -> PanelFlowSettings:
        """Merge config files in order, then apply CLI arguments.

        Missing config files are logged and skipped.

        Args:
            config_files: Files to read; later files override earlier ones
            env_file: ``.env`` file to read instead of the default
            cli_args: Flag values; ``None`` means the flag was not given
        """
        data: dict[str, Any] = {}
        for config_file in config_files or []:
            try:
                data.update(read_config_file(config_file))
            except FileNotFoundError:
                from panelflow.config.logging import get_logger

                get_logger(__name__).warning(
                    "Skipping missing configuration file", config_file=str(config_file)
                )

        if env_file is not None:
            data["_env_file"] = env_file
        return cls(**data).with_overrides(cli_args)

    def with_overrides(self, overrides: dict[str, Any] | None) -> PanelFlowSettings:
        """Copy of these settings with the non-``None`` overrides applied."""
        changes = {k: v for k, v in (overrides or {}).items() if v is not None}
        if not changes:
            return self
        return type(self)(**{**self.model_dump(), **changes})


_settings: PanelFlowSettings | None = None


def config_search_paths() -> list[Path]:
    """Config files that exist, lowest precedence first."""
    directories = [
        (Path.home() / ".config" / "panelflow", "config"),
        (Path.cwd(), "panelflow"),
    ]
    found: list[Path] = []
    for directory, stem in directories:
        for suffix in (".yaml", ".toml", ".json"):
            candidate = directory / f"{stem}{suffix}"
            try:
                if candidate.is_file():
                    found.append(candidate)
            except OSError:
                continue
    return found


def get_settings() -> PanelFlowSettings:
    """Process-wide settings, loaded from the search paths on first use."""
    global _settings
    if _settings is None:
        _settings = PanelFlowSettings.from_multiple_sources(
            config_files=config_search_paths()
        )
    return _settings


def set_settings(settings: PanelFlowSettings) -> None:
    global _settings
    _settings = settings


def reset_settings() -> None:
    """Forget the process-wide settings so the next access reloads them."""
    global _settings
    _settings = None


def get_settings_for_cli(
    config_file: Path | None = None,
    cli_overrides: dict[str, Any] | None = None,
) -> PanelFlowSettings:
    """Settings for one CLI invocation.

    An explicit ``--config`` file replaces the search paths. The global
    settings are never modified.

    Raises:
        FileNotFoundError: If ``config_file`` is given but does not exist
    """
    if config_file is None:
        return get_settings().with_overrides(cli_overrides)

    if not config_file.exists():
        raise FileNotFoundError(f"Config file not found: {config_file}")
    return PanelFlowSettings.from_multiple_sources(
        config_files=[config_file], cli_args=cli_overrides
    )
