"""Logging configuration for the mediastamp CLI."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

from mediastamp.config.models import LoggingSettings

_FILE_FORMAT = "%(asctime)s %(levelname)-8s [%(threadName)s] %(name)s: %(message)s"
_HANDLER_MARKER = "_mediastamp_handler"


def configure_logging(
    settings: LoggingSettings,
    *,
    console: Optional[Console] = None,
    quiet: bool = False,
) -> logging.Logger:
    """Attach console and optional rotating file handlers to the package logger.

    Calling this again replaces the handlers installed by a previous call, so
    repeated CLI invocations in one process do not duplicate output.

    Args:
        settings: Level and file rotation options.
        console: Rich console used for terminal output.
        quiet: When True, only errors reach the terminal; the file keeps everything.

    Returns:
        logging.Logger: The configured ``mediastamp`` logger.
    """
    level = logging.getLevelName(settings.level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    logger = logging.getLogger("mediastamp")
    logger.setLevel(level)
    for handler in list(logger.handlers):
        if getattr(handler, _HANDLER_MARKER, False):
            logger.removeHandler(handler)
            handler.close()

    terminal = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=False,
        markup=False,
    )
    terminal.setLevel(logging.ERROR if quiet else level)
    _install(logger, terminal)

    if settings.file is not None:
        log_path = settings.file.expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        rotating = RotatingFileHandler(
            log_path,
            maxBytes=settings.max_size_mb * 1024 * 1024,
            backupCount=settings.backup_count,
            encoding="utf-8",
        )
        rotating.setFormatter(logging.Formatter(_FILE_FORMAT))
        rotating.setLevel(level)
        _install(logger, rotating)

    return logger


def _install(logger: logging.Logger, handler: logging.Handler) -> None:
    setattr(handler, _HANDLER_MARKER, True)
    logger.addHandler(handler)


__all__ = ["configure_logging"]
