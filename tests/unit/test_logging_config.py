"""
Unit tests for structlog configuration.
"""

import logging

import pytest

from fastsqlite.core import config
from fastsqlite.utils.logging_config import LIBRARY_LOGGER, configure_logging


@pytest.fixture(autouse=True)
def _restore_level():
    library_logger = logging.getLogger(LIBRARY_LOGGER)
    root_level = logging.getLogger().level
    original = library_logger.level
    yield
    library_logger.setLevel(original)
    assert logging.getLogger().level == root_level


def test_configured_level_applies_to_package_logger():
    root_handlers = list(logging.getLogger().handlers)

    configure_logging("debug")

    assert logging.getLogger(LIBRARY_LOGGER).level == logging.DEBUG
    assert logging.getLogger().handlers == root_handlers


def test_unknown_level_falls_back_to_info(monkeypatch):
    monkeypatch.setattr(config.Config, "LOG_LEVEL", "verbose")

    configure_logging()

    assert logging.getLogger(LIBRARY_LOGGER).level == logging.INFO
    with pytest.raises(ValueError, match="LOG_LEVEL"):
        config.Config.validate("some.db")
