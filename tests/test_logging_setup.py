"""Tests for CLI logging configuration."""

import logging

import pytest
from rich.logging import RichHandler

from imgsel.config import LoggingSettings
from imgsel.logging_setup import configure_logging


@pytest.fixture
def imgsel_logger():
    logger = logging.getLogger("imgsel")
    level, handlers = logger.level, list(logger.handlers)
    yield logger
    logger.setLevel(level)
    logger.handlers[:] = handlers


def test_level_follows_settings(imgsel_logger: logging.Logger) -> None:
    configure_logging(LoggingSettings(level="info"))

    assert imgsel_logger.level == logging.INFO


def test_debug_flag_wins_over_level(imgsel_logger: logging.Logger) -> None:
    configure_logging(LoggingSettings(level="ERROR", debug=True))

    assert imgsel_logger.level == logging.DEBUG


def test_rich_handler_installed_once(imgsel_logger: logging.Logger) -> None:
    configure_logging(LoggingSettings())
    configure_logging(LoggingSettings(debug=True))

    rich_handlers = [h for h in imgsel_logger.handlers if isinstance(h, RichHandler)]
    assert len(rich_handlers) == 1
    assert imgsel_logger.level == logging.DEBUG
