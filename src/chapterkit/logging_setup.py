"""Logging configuration for chapterkit.

Levels and the optional log file come from ``ChapterkitSettings``. The console
shows warnings and errors unless verbose; the log file always records DEBUG.
"""

from __future__ import annotations

import logging
import sys

from rich.console import Console
from rich.logging import RichHandler

from chapterkit.settings import ChapterkitSettings, get_settings

LOGGER_NAME = "chapterkit"

FILE_FORMAT = "%(asctime)s | %(levelname)-5s | [%(name)s] %(message)s"
FILE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _console_handler(rich_console: bool) -> logging.Handler:
    if rich_console:
        return RichHandler(
            console=Console(stderr=True),
            show_time=True,
            show_path=False,
            rich_tracebacks=True,
            markup=False,
        )
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    return handler


def setup_logging(
    settings: ChapterkitSettings | None = None,
    *,
    verbose: bool = False,
    rich_console: bool = True,
) -> logging.Logger:
    """
    Configure the ``chapterkit`` logger from settings.

    Args:
        settings: Settings to apply (default: ``get_settings()``)
        verbose: Force DEBUG and echo it on the console
        rich_console: Use rich handler for pretty console output

    Returns:
        The ``chapterkit`` logger, with any previous handlers closed and replaced
    """
    if settings is None:
        settings = get_settings()
    level = logging.DEBUG if verbose else getattr(logging, settings.log_level)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()

    console = _console_handler(rich_console)
    console.setLevel(level if verbose else max(level, logging.WARNING))
    logger.addHandler(console)

    if settings.log_file is not None:
        settings.log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(settings.log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=FILE_DATE_FORMAT))
        logger.addHandler(file_handler)

    return logger
