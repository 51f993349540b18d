"""
Logging configuration.

Log records go through a rich RichHandler attached to the package logger, so
library users who never call setup_logging() get no output from us.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

from ensure_access.branding import console as default_console

PACKAGE_LOGGER = "ensure_access"


def setup_logging(level: str | int = logging.INFO, console: Console | None = None) -> logging.Logger:
    """
    Attach a RichHandler to the package logger.

    Calling it again replaces the previous handler instead of adding a second one.

    Args:
        level: Logging level name or number
        console: Console to write to, defaults to the shared stderr console

    Returns:
        The configured package logger
    """
    logger = logging.getLogger(PACKAGE_LOGGER)

    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    handler = RichHandler(
        console=console or default_console,
        show_time=False,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))

    logger.addHandler(handler)
    logger.setLevel(level)

    return logger
