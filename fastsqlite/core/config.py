"""
Configuration management for fastsqlite.

This module handles loading and validating environment variables.
"""

import os
from typing import Optional

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

_TRUE_VALUES = ("1", "true", "yes", "y", "on")
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _bool_env(key: str, default: bool) -> bool:
    value = os.getenv(key)
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in _TRUE_VALUES


def _float_env(key: str, default: float) -> float:
    value = os.getenv(key)
    if value is None or value.strip() == "":
        return default
    try:
        return float(value)
    except ValueError:
        return default


class Config:
    """Configuration class with environment variables."""

    # Database
    DB_PATH: str = os.getenv("DB_PATH", "data/fastsqlite.db")
    # Extra "key=value;key=value" options appended to every connection
    CONNECTION_OPTIONS: str = os.getenv("SQLITE_CONNECTION_OPTIONS", "")
    CONNECT_TIMEOUT: float = _float_env("SQLITE_CONNECT_TIMEOUT", 5.0)

    # Error policy defaults for new contexts
    THROW_ON_ERRORS: bool = _bool_env("SQLITE_THROW_ON_ERRORS", True)
    SHOW_IN_UI: bool = _bool_env("SQLITE_SHOW_IN_UI", False)

    # Console fallback sink
    CONSOLE_COLORS: bool = _bool_env("SQLITE_CONSOLE_COLORS", True)

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    @classmethod
    def validate(cls, db_path: Optional[str] = None) -> None:
        """
        Validate that required configuration is present.

        Raises:
            ValueError: If required configuration is missing or malformed.
        """
        if not (db_path or cls.DB_PATH):
            raise ValueError("DB_PATH must be configured")

        if cls.CONNECT_TIMEOUT < 0:
            raise ValueError("SQLITE_CONNECT_TIMEOUT must not be negative")

        if cls.LOG_LEVEL.upper() not in _LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {', '.join(_LOG_LEVELS)}")
