"""
Logging setup for deprecheck.

Every module logs under the ``deprecheck`` namespace. The CLI routes that
namespace to stderr through rich, so stdout only carries command output.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "deprecheck"

FILE_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(
    verbose: bool = False, quiet: bool = False, log_file: str | None = None
) -> logging.Logger:
    """
    Install the deprecheck log handlers.

    ``quiet`` wins over ``verbose``. Calling this again replaces the handlers
    installed by the previous call.

    Args:
        verbose: Log every symbol that is checked (DEBUG)
        quiet: Only log errors
        log_file: Optional file that also receives every record

    Returns:
        The ``deprecheck`` logger
    """
    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO

    handlers: list[logging.Handler] = [
        RichHandler(
            console=Console(stderr=True),
            rich_tracebacks=True,
            markup=False,
            show_path=False,
        )
    ]
    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT))
        handlers.append(file_handler)

    logger = logging.getLogger(ROOT_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    for handler in handlers:
        logger.addHandler(handler)
    logger.setLevel(level)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Logger for a module, nested under the ``deprecheck`` namespace."""
    if name != ROOT_LOGGER and not name.startswith(f"{ROOT_LOGGER}."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)
