"""Forward-only cursor over the rows of a read operation."""

from __future__ import annotations

import sqlite3
from typing import Any, Dict, Iterator, List, Optional, Tuple


class RowCursor:
    """
    Single-pass, non-restartable sequence of ``sqlite3.Row`` objects.

    Rows are fetched lazily from the underlying statement. The cursor closes
    itself once exhausted; close it explicitly (or use ``with``) when stopping
    early so the statement is released.
    """

    def __init__(self, cursor: sqlite3.Cursor) -> None:
        self._cursor = cursor
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def columns(self) -> Tuple[str, ...]:
        """Column names of the result set."""
        description = self._cursor.description or ()
        return tuple(column[0] for column in description)

    def __iter__(self) -> Iterator[sqlite3.Row]:
        return self

    def __next__(self) -> sqlite3.Row:
        row = self.read()
        if row is None:
            raise StopIteration
        return row

    def read(self) -> Optional[sqlite3.Row]:
        """Advance to the next row; None once the result set is exhausted."""
        if self._closed:
            return None
        row = self._cursor.fetchone()
        if row is None:
            self.close()
        return row

    def fetchall(self) -> List[sqlite3.Row]:
        """Drain the remaining rows."""
        return list(self)

    def dicts(self) -> Iterator[Dict[str, Any]]:
        """Yield the remaining rows as plain dicts."""
        for row in self:
            yield dict(zip(row.keys(), row))

    def close(self) -> None:
        if not self._closed:
            self._closed = True
            self._cursor.close()

    def __enter__(self) -> "RowCursor":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
