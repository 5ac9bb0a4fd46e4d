"""Logging configuration for the imgsel CLI."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

from imgsel.config.models import LoggingSettings


def configure_logging(settings: LoggingSettings) -> None:
    """Route ``imgsel`` loggers through a Rich handler at the configured level."""
    level = logging.DEBUG if settings.debug else logging.getLevelName(settings.level)

    logger = logging.getLogger("imgsel")
    logger.setLevel(level)
    if not any(isinstance(handler, RichHandler) for handler in logger.handlers):
        handler = RichHandler(console=Console(stderr=True), show_path=False)
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)
