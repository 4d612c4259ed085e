"""fastsqlite package exports."""

from fastsqlite.core.context import (
    ConnectionContext,
    ErrorMode,
    SqliteHelperError,
    format_error_message,
)
from fastsqlite.core.database import build_connection_string
from fastsqlite.core.row_cursor import RowCursor
from fastsqlite.services.sqlite_helper import SqliteHelper
from fastsqlite.utils.log_sink import ConsoleLogSink, LogLevel, MemoryLogSink, StructlogLogSink

__all__ = [
    "ConnectionContext",
    "ConsoleLogSink",
    "ErrorMode",
    "LogLevel",
    "MemoryLogSink",
    "RowCursor",
    "SqliteHelper",
    "SqliteHelperError",
    "StructlogLogSink",
    "build_connection_string",
    "format_error_message",
]
