"""
Logging for luaguard.

Diagnostics go to stderr through a rich handler so that stdout stays
free for reports and JSON. Handlers are attached to the ``luaguard``
logger only; the root logger of a host application is left alone.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "luaguard"

FILE_LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

# Marks handlers installed here so a second setup replaces them
_HANDLER_FLAG = "_luaguard_handler"


def _level_for(verbose: bool, quiet: bool) -> int:
    if quiet:
        return logging.ERROR
    if verbose:
        return logging.DEBUG
    return logging.WARNING


def setup_logging(
    verbose: bool = False, quiet: bool = False, log_file: Optional[str] = None
) -> logging.Logger:
    """
    Install the rich stderr handler (and an optional file handler).

    Safe to call more than once: handlers from an earlier call are
    replaced, not stacked.

    Args:
        verbose: DEBUG level, with source paths in each record
        quiet: ERROR level; wins over ``verbose``
        log_file: Also append plain-text records to this file

    Returns:
        The ``luaguard`` logger
    """
    level = _level_for(verbose, quiet)
    logger = logging.getLogger(LOGGER_NAME)

    for handler in list(logger.handlers):
        if getattr(handler, _HANDLER_FLAG, False):
            logger.removeHandler(handler)
            handler.close()

    console_handler = RichHandler(
        console=Console(stderr=True),
        markup=False,
        rich_tracebacks=True,
        show_path=verbose,
        log_time_format="[%X]",
    )
    handlers: list = [console_handler]

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT))
        handlers.append(file_handler)

    for handler in handlers:
        setattr(handler, _HANDLER_FLAG, True)
        logger.addHandler(handler)

    logger.setLevel(level)
    logger.propagate = False
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Logger namespaced under ``luaguard`` (the package logger when ``name`` is None)."""
    if name is None:
        return logging.getLogger(LOGGER_NAME)
    if name != LOGGER_NAME and not name.startswith(LOGGER_NAME + "."):
        name = f"{LOGGER_NAME}.{name}"
    return logging.getLogger(name)
