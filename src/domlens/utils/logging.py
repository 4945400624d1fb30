"""
Logging configuration for domlens.

All package loggers hang under the "domlens" root logger. Library code
only ever calls get_logger(); applications that want output call
setup_logging() once, optionally with LoggingSettings from the config.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from domlens.config.settings import LoggingSettings


ROOT_LOGGER_NAME = "domlens"

DEFAULT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_logging_configured = False

# A library must not print unless the application asks it to.
logging.getLogger(ROOT_LOGGER_NAME).addHandler(logging.NullHandler())


def setup_logging(
    settings: "LoggingSettings | None" = None,
    level: str | None = None,
) -> logging.Logger:
    """
    Attach console and/or rotating file handlers to the domlens logger.

    Calling it again is a no-op until reset_logging() runs.

    Args:
        settings: Logging configuration. If None, console output at INFO.
        level: Level name overriding settings.level (e.g. "DEBUG")

    Returns:
        The configured domlens root logger.
    """
    global _logging_configured

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    if _logging_configured:
        return logger

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    if settings is None:
        level_name = level or "INFO"
        formatter = logging.Formatter(DEFAULT_FORMAT, DEFAULT_DATE_FORMAT)
        to_console = True
        file_path = None
    else:
        level_name = level or settings.level
        formatter = logging.Formatter(settings.format, settings.date_format)
        to_console = settings.log_to_console
        file_path = settings.file_path

    numeric_level = getattr(logging, level_name.upper())
    logger.setLevel(numeric_level)

    if to_console:
        console = logging.StreamHandler(sys.stdout)
        console.setLevel(numeric_level)
        console.setFormatter(formatter)
        logger.addHandler(console)

    if file_path is not None:
        logger.addHandler(
            _rotating_handler(
                Path(file_path),
                max_bytes=settings.max_file_size_mb * 1024 * 1024,
                backup_count=settings.backup_count,
                level=numeric_level,
                formatter=formatter,
            )
        )

    logger.propagate = False
    _logging_configured = True
    return logger


def _rotating_handler(
    file_path: Path,
    max_bytes: int,
    backup_count: int,
    level: int,
    formatter: logging.Formatter,
) -> RotatingFileHandler:
    """Create a size-rotated UTF-8 file handler, creating parent dirs."""
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
    Get a logger under the domlens root.

    Args:
        name: Usually __name__. Names outside the package are nested
              under "domlens." so they share its handlers.

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.debug("Extracted %d nodes", count)
    """
    if name is None:
        return logging.getLogger(ROOT_LOGGER_NAME)

    if name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)

    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def reset_logging() -> None:
    """Close and detach all handlers added by setup_logging()."""
    global _logging_configured

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in logger.handlers[:]:
        if isinstance(handler, logging.NullHandler):
            continue
        handler.close()
        logger.removeHandler(handler)

    logger.propagate = True
    _logging_configured = False


class ContextLoggerAdapter(logging.LoggerAdapter):
    """
    Logger adapter appending [key=value] pairs to every message.

    Example:
        >>> log = ContextLoggerAdapter(get_logger(__name__), {"key": "ab12"})
        >>> log.info("Cache hit")  # "Cache hit [key=ab12]"
    """

    def process(self, msg: str, kwargs: dict) -> tuple[str, dict]:
        if self.extra:
            context = " ".join(f"[{k}={v}]" for k, v in self.extra.items())
            msg = f"{msg} {context}"
        return msg, kwargs


def get_logger_with_context(name: str | None = None, **context: str) -> ContextLoggerAdapter:
    """Get a logger whose messages carry the given context fields."""
    return ContextLoggerAdapter(get_logger(name), context)
