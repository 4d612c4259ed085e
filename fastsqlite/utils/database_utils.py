"""
Database utility helpers.

Provides explicit transaction handling for connections opened in autocommit
mode (``isolation_level=None``). The context manager issues BEGIN itself and
guarantees rollback on any exception.
"""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from typing import Iterator, Optional

from fastsqlite.utils.logging_config import get_logger


logger = get_logger(__name__)


class TransactionError(Exception):
    """Raised when a database transaction fails."""

    pass


class TransactionScope:
    """Handle yielded by ``transactional``; lets the block veto the commit."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn
        self.rollback_only = False
        self.reason: Optional[str] = None

    def mark_rollback(self, reason: str) -> None:
        self.rollback_only = True
        self.reason = reason


@contextmanager
def transactional(conn: sqlite3.Connection) -> Iterator[TransactionScope]:
    """
    Provide a transactional scope around a series of database operations.

    Commits when the block finishes normally, rolls back when the block marked
    the scope for rollback, and rolls back then raises ``TransactionError``
    when any exception escapes the block or the COMMIT itself fails.
    """
    conn.execute("BEGIN")
    scope = TransactionScope(conn)
    try:
        yield scope
        if scope.rollback_only:
            logger.warning("transaction_rollback", reason=scope.reason)
            conn.rollback()
        else:
            conn.commit()
    except Exception as exc:
        logger.error("transaction_rollback", error=str(exc))
        if conn.in_transaction:
            conn.rollback()
        raise TransactionError(str(exc)) from exc
