"""
SqliteHelper: dictionary-driven CRUD on top of a ConnectionContext.

Each operation builds a parameterized statement, runs it on the context's
connection and returns a plain result. Failures go through the context's
error policy: a ``SqliteHelperError`` under THROW, or a logged message and a
sentinel (-1, False or None) under LOG_AND_RETURN.
"""

from __future__ import annotations

import sqlite3
from typing import Any, Iterable, Mapping, Optional, Union

import structlog

from fastsqlite.core.context import ConnectionContext, SqliteHelperError
from fastsqlite.core.query_builder import (
    Columns,
    FieldMap,
    Statement,
    build_delete,
    build_delete_where,
    build_insert,
    build_select,
    build_update,
)
from fastsqlite.core.row_cursor import RowCursor
from fastsqlite.utils.database_utils import TransactionError, transactional

logger = structlog.get_logger(__name__)

# Failures each operation converts into the error policy
_HANDLED_ERRORS = (sqlite3.Error, SqliteHelperError, TransactionError, ValueError, TypeError)


class SqliteHelper:
    """CRUD operations executed against one connection context."""

    component = "SqliteHelper"

    def __init__(self, context: ConnectionContext) -> None:
        self.context = context

    def _fail(self, operation: str, exc: BaseException, sentinel: Any) -> Any:
        return self.context.fail(operation, exc, sentinel, component=self.component)

    def _execute(self, statement: Statement) -> sqlite3.Cursor:
        return self.context.connection.execute(statement.sql, statement.params)

    def _execute_count(self, statement: Statement) -> int:
        cursor = self._execute(statement)
        try:
            # DDL and PRAGMA report -1; they changed no rows
            return max(cursor.rowcount, 0)
        finally:
            cursor.close()

    # --------------------------------------------------------------------- #
    # Read helpers
    # --------------------------------------------------------------------- #

    def select(self, table: str, columns: Columns = "*", condition: str = "") -> Optional[RowCursor]:
        """
        Rows of ``table`` matching a raw condition.

        Args:
            table: Table name (interpolated, must be trusted).
            columns: "a, b" string or an iterable of column names.
            condition: Raw SQL fragment appended as ``AND <condition>``.

        Returns:
            A forward-only RowCursor, or None on failure under LOG_AND_RETURN.
        """
        try:
            return RowCursor(self._execute(build_select(table, columns, condition)))
        except _HANDLED_ERRORS as exc:
            return self._fail("select", exc, None)

    def query_reader(self, sql: str) -> Optional[RowCursor]:
        """Run trusted SQL and return its rows."""
        try:
            return RowCursor(self._execute(Statement(sql)))
        except _HANDLED_ERRORS as exc:
            return self._fail("query_reader", exc, None)

    def query_scalar(self, sql: str) -> Any:
        """First column of the first row, or None when there are no rows."""
        try:
            cursor = self._execute(Statement(sql))
            try:
                row = cursor.fetchone()
            finally:
                cursor.close()
        except _HANDLED_ERRORS as exc:
            return self._fail("query_scalar", exc, None)
        return row[0] if row is not None else None

    def query(self, sql: str) -> int:
        """Run trusted SQL and return the number of affected rows."""
        try:
            return self._execute_count(Statement(sql))
        except _HANDLED_ERRORS as exc:
            return self._fail("query", exc, -1)

    # --------------------------------------------------------------------- #
    # Write helpers
    # --------------------------------------------------------------------- #

    def insert(self, table: str, data: Union[FieldMap, Iterable[FieldMap]]) -> int:
        """
        Insert one row, or several rows in a single transaction.

        A mapping inserts one row; any other iterable of mappings is handed
        to ``insert_many``.

        Returns:
            Number of inserted rows, or -1 on failure under LOG_AND_RETURN.
        """
        if isinstance(data, (str, bytes, sqlite3.Row)):
            error = TypeError(
                "Expected a mapping of column names to values or a list of them, "
                f"got {type(data).__name__}"
            )
            return self._fail("insert", error, -1)
        if not isinstance(data, Mapping):
            return self.insert_many(table, data)
        try:
            return self._execute_count(build_insert(table, data))
        except _HANDLED_ERRORS as exc:
            return self._fail("insert", exc, -1)

    def insert_many(self, table: str, rows: Iterable[FieldMap]) -> int:
        """
        Insert all rows or none of them.

        Rows are inserted in order inside one transaction. The first row that
        is not inserted stops the batch with a total of -1; the transaction
        commits only when the total is positive. Any exception rolls the
        transaction back before the error policy applies.

        Returns:
            Number of inserted rows, 0 for an empty batch, -1 on failure.
        """
        count = 0
        try:
            with transactional(self.context.connection) as scope:
                for index, data in enumerate(rows):
                    inserted = self._execute_count(build_insert(table, data))
                    if inserted <= 0:
                        logger.warning("batch_insert_row_skipped", table=table, row_index=index)
                        count = -1
                        break
                    count += inserted

                if count <= 0:
                    scope.mark_rollback(f"batch insert into {table} added no rows")
        except _HANDLED_ERRORS as exc:
            return self._fail("insert_many", exc, -1)

        logger.debug("batch_insert_finished", table=table, count=count)
        return count

    def last_insert_id(self) -> int:
        """Rowid generated by the most recent successful insert on this connection."""
        try:
            return int(self.context.connection.execute("SELECT last_insert_rowid()").fetchone()[0])
        except _HANDLED_ERRORS as exc:
            return self._fail("last_insert_id", exc, -1)

    def update(self, table: str, data: FieldMap, condition: str = "") -> bool:
        """
        Set columns from ``data`` on rows matching a raw condition.

        An empty condition updates every row.

        Returns:
            True when at least one row changed.
        """
        try:
            return self._execute_count(build_update(table, data, condition)) > 0
        except _HANDLED_ERRORS as exc:
            return self._fail("update", exc, False)

    def update_field(self, table: str, field_name: str, field_value: Any, condition: str = "") -> bool:
        """Single-column shortcut for ``update``."""
        return self.update(table, {field_name: field_value}, condition)

    def delete(
        self, table: str, condition: Union[str, FieldMap], logical_operator: str = "AND"
    ) -> int:
        """
        Delete rows matching a raw condition.

        The condition has no default and a blank one is refused, so a full
        table is never wiped by accident. A mapping is handed to
        ``delete_where``.

        Returns:
            Number of deleted rows, or -1 on failure under LOG_AND_RETURN.
        """
        if isinstance(condition, Mapping):
            return self.delete_where(table, condition, logical_operator)
        try:
            return self._execute_count(build_delete(table, condition))
        except _HANDLED_ERRORS as exc:
            return self._fail("delete", exc, -1)

    def delete_where(self, table: str, conditions: FieldMap, logical_operator: str = "AND") -> int:
        """Delete rows where ``column = value`` pairs hold, joined by AND or OR."""
        try:
            return self._execute_count(build_delete_where(table, conditions, logical_operator))
        except _HANDLED_ERRORS as exc:
            return self._fail("delete_where", exc, -1)
