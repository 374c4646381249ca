"""Logging setup for the gptchat command line."""

import logging

from rich.console import Console
from rich.logging import RichHandler

_LOGGING_CONFIGURED = False


def setup_logging(
    level: int | str = logging.WARNING,
    console: Console | None = None,
) -> logging.Logger:
    """
    Attach a rich handler to the `gptchat` logger.

    Only the first call installs the handler; later calls just change the
    level. Library code never calls this, so embedding applications keep
    control of their own logging.
    """
    global _LOGGING_CONFIGURED

    logger = logging.getLogger("gptchat")
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING
    logger.setLevel(level)

    if not _LOGGING_CONFIGURED:
        handler = RichHandler(
            console=console or Console(stderr=True),
            show_path=False,
            rich_tracebacks=True,
        )
        handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
        logger.addHandler(handler)
        logger.propagate = False
        _LOGGING_CONFIGURED = True

    return logger
