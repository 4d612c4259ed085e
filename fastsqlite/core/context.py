"""
Connection context: one SQLite handle plus the error policy around it.

A context belongs to a single logical thread of control (a worker, a script
run). It is created explicitly, opened with ``init()`` and closed with
``deinit()``; every helper operation runs against the context it is given.
"""

from __future__ import annotations

import sqlite3
from enum import Enum
from typing import Any, Optional, TypeVar, Union

from fastsqlite.core.config import Config
from fastsqlite.core.database import ConnectionOptions, open_connection, resolve_db_path
from fastsqlite.utils.log_sink import ConsoleLogSink, LogLevel, LogSink
from fastsqlite.utils.logging_config import get_logger


logger = get_logger(__name__)

T = TypeVar("T")

NOT_OPEN_MESSAGE = "connection already closed / not yet opened"


class ErrorMode(str, Enum):
    """What an operation does when the database call fails."""

    THROW = "throw"
    LOG_AND_RETURN = "log_and_return"


class SqliteHelperError(Exception):
    """Raised by helper operations when the context's policy is THROW."""

    def __init__(
        self,
        message: str,
        *,
        operation: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.operation = operation
        self.cause = cause


def format_error_message(component: str, operation: str, message: str) -> str:
    """Build the "[Component.operation]: message" text used for every failure."""
    return f"[{component}.{operation}]: {message}"


class ConnectionContext:
    """Holds the database handle, error mode and log sink of one execution context."""

    component = "ConnectionContext"

    def __init__(
        self,
        log_sink: Optional[LogSink] = None,
        *,
        error_mode: Optional[ErrorMode] = None,
        show_in_ui: Optional[bool] = None,
    ) -> None:
        self.log_sink: LogSink = log_sink or ConsoleLogSink()
        if error_mode is None:
            error_mode = ErrorMode.THROW if Config.THROW_ON_ERRORS else ErrorMode.LOG_AND_RETURN
        self.error_mode = ErrorMode(error_mode)
        self.show_in_ui = Config.SHOW_IN_UI if show_in_ui is None else show_in_ui
        self.database_path: Optional[str] = None
        self._conn: Optional[sqlite3.Connection] = None

    # --------------------------------------------------------------------- #
    # Lifecycle
    # --------------------------------------------------------------------- #

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    @property
    def connection(self) -> sqlite3.Connection:
        """The open connection; raises SqliteHelperError when there is none."""
        if self._conn is None:
            raise SqliteHelperError(NOT_OPEN_MESSAGE)
        return self._conn

    def init(
        self,
        database_path: Optional[str] = None,
        options: Optional[ConnectionOptions] = "",
        *,
        error_mode: Optional[ErrorMode] = None,
        show_in_ui: Optional[bool] = None,
    ) -> bool:
        """
        Open the database, creating the file when it does not exist.

        Args:
            database_path: Path of the database file (Config.DB_PATH if None or blank).
            options: Extra connection options, as "key=value;key=value" or a mapping.
            error_mode: Policy applied by every operation on this context;
                keeps the current one when None.
            show_in_ui: Passed to the log sink with every message; keeps the
                current flag when None.

        Returns:
            True when connected; False on failure under LOG_AND_RETURN.

        Raises:
            SqliteHelperError: On failure under THROW.
        """
        if error_mode is not None:
            self.error_mode = ErrorMode(error_mode)
        if show_in_ui is not None:
            self.show_in_ui = show_in_ui

        if self._conn is not None:
            # Out of contract: don't leak the previous handle
            logger.warning("connection_reinitialized", path=self.database_path)
            self._conn.close()
            self._conn = None

        try:
            self._conn = open_connection(database_path, options)
        except (sqlite3.Error, OSError, ValueError) as exc:
            return self.fail("init", f"Database connection error: {exc}", False, cause=exc)

        self.database_path = resolve_db_path(database_path)
        logger.info("context_initialized", path=self.database_path, error_mode=self.error_mode.value)
        return True

    def deinit(self) -> None:
        """Close the connection; closing twice is an error under the context's policy."""
        if self._conn is None:
            self.fail("deinit", NOT_OPEN_MESSAGE, None)
            return

        self._conn.close()
        self._conn = None
        logger.info("context_closed", path=self.database_path)

    def __enter__(self) -> "ConnectionContext":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self._conn is not None:
            self.deinit()

    # --------------------------------------------------------------------- #
    # PRAGMA passthroughs
    # --------------------------------------------------------------------- #

    def pragma_set(self, name_and_value: str) -> None:
        """Run ``PRAGMA <name_and_value>;``, e.g. ``pragma_set("foreign_keys = ON")``."""
        try:
            self.connection.execute(f"PRAGMA {name_and_value};").close()
        except (sqlite3.Error, SqliteHelperError) as exc:
            self.fail("pragma_set", f"Error setting pragma: {_reason(exc)}", None, cause=exc)

    def pragma_get(self, name: str) -> Any:
        """Value of ``PRAGMA <name>;`` (first column of the first row), or None."""
        try:
            row = self.connection.execute(f"PRAGMA {name};").fetchone()
        except (sqlite3.Error, SqliteHelperError) as exc:
            return self.fail("pragma_get", f"Error reading pragma: {_reason(exc)}", None, cause=exc)
        return row[0] if row is not None else None

    # --------------------------------------------------------------------- #
    # Error policy
    # --------------------------------------------------------------------- #

    def send_to_log(self, message: str, level: LogLevel = LogLevel.INFO) -> None:
        self.log_sink.send(message, level, self.show_in_ui)

    def fail(
        self,
        operation: str,
        error: Union[str, BaseException],
        sentinel: T,
        *,
        cause: Optional[BaseException] = None,
        component: Optional[str] = None,
    ) -> T:
        """
        Apply the error policy to a failed operation.

        Raises SqliteHelperError under THROW; otherwise logs the formatted
        message at Error level and returns ``sentinel``.
        """
        if isinstance(error, BaseException):
            cause = cause or error
            error = _reason(error)
        message = format_error_message(component or self.component, operation, error)

        if self.error_mode is ErrorMode.THROW:
            raise SqliteHelperError(message, operation=operation, cause=cause) from cause

        logger.debug("operation_failed", operation=operation, error=error)
        self.send_to_log(message, LogLevel.ERROR)
        return sentinel


def _reason(exc: BaseException) -> str:
    if isinstance(exc, SqliteHelperError):
        return exc.message
    return str(exc)
