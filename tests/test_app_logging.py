"""Tests for logging configuration."""

import logging

import pytest

from kcalcal.api.app import create_app
from kcalcal.app_logging import LOGGER_NAME, configure_logging


@pytest.fixture
def package_logger():
    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()
    yield logger
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)


def test_configure_logging_adds_single_handler(package_logger) -> None:
    configure_logging()
    configure_logging()

    assert len(package_logger.handlers) == 1
    assert package_logger.propagate is False
    assert package_logger.level == logging.INFO


def test_repeat_calls_update_level(package_logger) -> None:
    configure_logging("info")
    configure_logging("debug")

    assert package_logger.level == logging.DEBUG
    assert len(package_logger.handlers) == 1


def test_create_app_uses_configured_level(package_logger, container) -> None:
    container.settings.log_level = "WARNING"

    create_app(container)

    assert package_logger.level == logging.WARNING
    assert len(package_logger.handlers) == 1
