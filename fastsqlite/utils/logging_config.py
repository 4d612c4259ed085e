"""
Logging configuration for fastsqlite.

This module sets up structured logging with structlog.
"""

import logging

import structlog
from structlog.stdlib import LoggerFactory

from fastsqlite.core.config import Config

LIBRARY_LOGGER = "fastsqlite"


def configure_logging(level: str = None) -> None:
    """
    Configure structured logging for the library.

    Sets up structlog and applies the configured level to the package's own
    "fastsqlite" logger; handlers and the root logger are left to the host.
    Unknown level names fall back to INFO (Config.validate reports them).
    """
    level_name = (level or Config.LOG_LEVEL or "INFO").strip().upper()
    if not isinstance(logging.getLevelName(level_name), int):
        level_name = "INFO"
    logging.getLogger(LIBRARY_LOGGER).setLevel(level_name)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ],
        context_class=dict,
        logger_factory=LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str = None) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Optional name for the logger. If None, uses the calling module's name.

    Returns:
        Configured structured logger instance.
    """
    return structlog.get_logger(name)


# Configure logging when module is imported
configure_logging()
