"""Logging setup for monorelease commands."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

_LOGGER_NAME = "monorelease"


def configure_logging(*, verbose: bool = False, console: Console | None = None) -> logging.Logger:
    """Send monorelease logs to a rich console.

    Messages may contain rich markup (commit classification lines do).
    """
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)

    # Reset handlers to avoid duplicate output when the CLI is invoked multiple times.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = RichHandler(
        console=console or Console(stderr=True),
        markup=True,
        show_time=False,
        show_path=False,
        show_level=verbose,
    )
    handler.setLevel(level)
    logger.addHandler(handler)

    return logger


__all__ = ["configure_logging"]
