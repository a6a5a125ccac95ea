"""
Logging setup for the Knowledge Graph Engine.

All module loggers hang off the ``kg_engine`` logger, which gets a
console handler and, when configured, a size-rotated log file.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING, TextIO

if TYPE_CHECKING:
    from kg_engine.config.settings import LoggingSettings


ROOT_LOGGER_NAME = "kg_engine"

_logging_configured = False


def setup_logging(
    settings: "LoggingSettings | None" = None,
    level: str | None = None,
    stream: TextIO | None = None,
) -> logging.Logger:
    """
    Configure the ``kg_engine`` logger.

    Later calls are no-ops until reset_logging() is called.

    Args:
        settings: Logging configuration; defaults when None
        level: Level name overriding settings.level (the CLI's --verbose)
        stream: Console stream, stdout by default

    Returns:
        The application root logger
    """
    global _logging_configured

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    if _logging_configured:
        return logger

    if settings is None:
        from kg_engine.config.settings import LoggingSettings

        settings = LoggingSettings()

    resolved_level = getattr(logging, (level or settings.level).upper())
    formatter = logging.Formatter(fmt=settings.format, datefmt=settings.date_format)

    logger.handlers.clear()
    logger.setLevel(resolved_level)

    if settings.log_to_console:
        console_handler = logging.StreamHandler(stream or sys.stdout)
        console_handler.setLevel(resolved_level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if settings.file_path is not None:
        logger.addHandler(_create_file_handler(
            file_path=settings.file_path,
            max_bytes=settings.max_file_size_mb * 1024 * 1024,
            backup_count=settings.backup_count,
            level=resolved_level,
            formatter=formatter,
        ))

    # Records stop here instead of reaching the root logger
    logger.propagate = False
    _logging_configured = True

    return logger


def _create_file_handler(
    file_path: Path,
    max_bytes: int,
    backup_count: int,
    level: int,
    formatter: logging.Formatter,
) -> RotatingFileHandler:
    """Build a UTF-8 rotating file handler, creating the log directory."""
    file_path.parent.mkdir(parents=True, exist_ok=True)

    handler = RotatingFileHandler(
        filename=str(file_path),
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def get_logger(name: str | None = None) -> logging.Logger:
    """
    Return a logger under the ``kg_engine`` hierarchy.

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("Loaded 12 relations")
    """
    if name is None:
        return logging.getLogger(ROOT_LOGGER_NAME)
    if name.startswith(ROOT_LOGGER_NAME):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def reset_logging() -> None:
    """Close and detach all handlers and allow setup_logging() to run again."""
    global _logging_configured

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)

    logger.propagate = True
    _logging_configured = False
