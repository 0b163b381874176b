"""Configuration loading and validation."""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

LOGGER = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("~/.config/oll/config.yaml")
DEFAULT_ROOT_DIR = Path("~/.local/lib/oll")
DEFAULT_DATABASE_PATH = Path("/var/tmp/oll.db")
DEFAULT_TABLE = "oll"
DEFAULT_ALGORITHM = "perceptron"
DEFAULT_LOG_LEVEL = "info"

_TABLE_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class ConfigError(ValueError):
    """Raised when configuration is invalid or missing."""


@dataclass(frozen=True)
class LoggingConfig:
    """Logging-related configuration."""

    level: str = DEFAULT_LOG_LEVEL
    debug_file: bool = False


@dataclass(frozen=True)
class Config:
    """Fully parsed configuration."""

    root_dir: Path = DEFAULT_ROOT_DIR.expanduser()
    database: Path = DEFAULT_DATABASE_PATH
    table: str = DEFAULT_TABLE
    algorithm: str = DEFAULT_ALGORITHM
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_config(path: Path | str | None = None) -> Config:
    """Load and validate configuration from YAML.

    Without an explicit path or ``$OLL_CONFIG`` a missing default file yields
    the built-in defaults.
    """

    config_path, explicit = _resolve_config_path(path)
    if not config_path.exists():
        if explicit:
            raise ConfigError(f"Config file not found: {config_path}")
        LOGGER.debug("No config at %s, using defaults", config_path)
        return Config()

    with config_path.open("r", encoding="utf-8") as handle:
        try:
            raw = yaml.safe_load(handle) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML in {config_path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise ConfigError("Configuration root must be a mapping.")

    return _parse_config(raw)


def validate_table_name(name: str) -> str:
    """Return ``name`` if it is usable as an unquoted SQL identifier."""

    if not isinstance(name, str) or not _TABLE_NAME.match(name):
        raise ConfigError(f"Invalid table name: {name!r}")
    return name


def _resolve_config_path(explicit: Path | str | None) -> tuple[Path, bool]:
    if explicit:
        return Path(explicit).expanduser(), True
    env_path = os.environ.get("OLL_CONFIG")
    if env_path:
        return Path(env_path).expanduser(), True
    return DEFAULT_CONFIG_PATH.expanduser(), False


def _parse_config(raw: dict[str, Any]) -> Config:
    root_dir = Path(raw.get("rootdir") or raw.get("root_dir") or DEFAULT_ROOT_DIR).expanduser()
    database = _parse_database(raw.get("database"))
    table = validate_table_name(str(raw.get("table") or DEFAULT_TABLE))
    algorithm = _parse_algorithm(raw.get("algorithm"))
    logging_config = _parse_logging(raw.get("logging"))
    return Config(
        root_dir=root_dir,
        database=database,
        table=table,
        algorithm=algorithm,
        logging=logging_config,
    )


def _parse_database(value: Any) -> Path:
    if value is None:
        return DEFAULT_DATABASE_PATH
    if not isinstance(value, (str, Path)):
        raise ConfigError("database must be a string path.")
    text = str(value)
    if not text.strip():
        raise ConfigError("database cannot be empty.")
    return Path(text).expanduser()


def _parse_algorithm(value: Any) -> str:
    from .classifiers.registry import DEFAULT_FACTORY

    if value is None:
        return DEFAULT_ALGORITHM
    if not isinstance(value, str):
        raise ConfigError("algorithm must be a string.")
    normalized = value.strip().lower()
    if normalized not in DEFAULT_FACTORY.names():
        supported = ", ".join(DEFAULT_FACTORY.names())
        raise ConfigError(f"Unknown algorithm '{value}' (supported: {supported}).")
    return normalized


def _parse_logging(value: Any) -> LoggingConfig:
    if value is None:
        return LoggingConfig()
    if not isinstance(value, dict):
        raise ConfigError("logging must be a mapping.")
    level = str(value.get("level", DEFAULT_LOG_LEVEL)).lower()
    debug_file = bool(value.get("debug_file", False))
    return LoggingConfig(level=level, debug_file=debug_file)


__all__ = [
    "Config",
    "ConfigError",
    "LoggingConfig",
    "DEFAULT_ALGORITHM",
    "DEFAULT_DATABASE_PATH",
    "DEFAULT_TABLE",
    "load_config",
    "validate_table_name",
]
