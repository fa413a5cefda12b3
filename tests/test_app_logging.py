"""Tests for logging configuration."""

import logging

from glycoscan.app_logging import configure_logging


def test_configure_logging_idempotent() -> None:
    logger = logging.getLogger("glycoscan")
    logger.handlers.clear()

    configure_logging()
    first_count = len(logger.handlers)

    configure_logging()
    second_count = len(logger.handlers)

    assert first_count == 1
    assert second_count == 1


def test_debug_flag_sets_level() -> None:
    logger = logging.getLogger("glycoscan")

    configure_logging(debug=True)
    assert logger.level == logging.DEBUG

    configure_logging()
    assert logger.level == logging.INFO
