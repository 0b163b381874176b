"""Logging setup for the oll command-line tools."""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from .config import ConfigError, LoggingConfig

FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
MAIN_LOG_NAME = "oll.log"
DEBUG_LOG_NAME = "debug.log"
LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "warn": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
}


class ConsoleFormatter(logging.Formatter):
    """Prefixes each console line with a one-letter level marker."""

    SYMBOLS: dict[int, tuple[str, str]] = {
        logging.DEBUG: ("D", "\x1b[36m"),
        logging.INFO: ("I", "\x1b[32m"),
        logging.WARNING: ("!", "\x1b[33m"),
        logging.ERROR: ("X", "\x1b[31m"),
        logging.CRITICAL: ("X", "\x1b[35m"),
    }

    RESET = "\x1b[0m"

    def __init__(self, use_color: bool) -> None:
        super().__init__("%(name)s: %(message)s")
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        symbol, color = self.SYMBOLS.get(record.levelno, ("?", "\x1b[37m"))
        text = super().format(record)
        if self.use_color:
            symbol = f"{color}{symbol}{self.RESET}"
        return f"{symbol} {text}"


def configure_logging(
    logging_config: LoggingConfig,
    root_dir: Path | None,
    *,
    console_level: int = logging.WARNING,
) -> None:
    """Install console and (when ``root_dir`` is given) rotating file handlers.

    The console never shows less than ``console_level`` so command output
    stays readable; the files follow the configured level.
    """

    level = level_from_string(logging_config.level)
    handlers: list[logging.Handler] = [_console_handler(max(console_level, level))]

    if root_dir is not None:
        log_dir = (root_dir / "logs").expanduser()
        log_dir.mkdir(parents=True, exist_ok=True)
        handlers.append(_file_handler(log_dir / MAIN_LOG_NAME, max(level, logging.INFO)))
        if logging_config.debug_file:
            handlers.append(_file_handler(log_dir / DEBUG_LOG_NAME, logging.DEBUG))

    logging.basicConfig(level=level, handlers=handlers, force=True)


def level_from_string(level: str) -> int:
    try:
        return LEVELS[level.strip().lower()]
    except KeyError as exc:
        raise ConfigError(f"Unknown log level: {level}") from exc


def _file_handler(path: Path, level: int) -> logging.Handler:
    handler = RotatingFileHandler(path, maxBytes=5_000_000, backupCount=5, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(FILE_FORMAT))
    return handler


def _console_handler(level: int) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    stream = getattr(handler, "stream", None)
    handler.setFormatter(ConsoleFormatter(bool(getattr(stream, "isatty", lambda: False)())))
    return handler


__all__ = ["configure_logging", "level_from_string"]
