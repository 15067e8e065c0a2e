"""SQLite adapter over the standard-library ``sqlite3`` module.

One connection is opened lazily and shared by every caller.  A plain
query issued while a transaction is open on that connection runs inside
the open transaction and leaves its commit or rollback to the owner.
"""

from __future__ import annotations

import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from txsession.core.context import TransactionOptions
from txsession.core.errors import DatabaseConnectionError
from txsession.core.protocols import Connection
from txsession.logging import get_logger

from .base import DatabaseAdapter
from .types import DatabaseConfig, DatabaseType

logger = get_logger(__name__)


class SQLiteAdapter(DatabaseAdapter):
    """
    Single-connection SQLite client.

    SQLite transactions are always serializable, so ``isolation_level`` is
    not forwarded; ``read_only`` turns on ``PRAGMA query_only`` until the
    transaction finishes.  ``readonly=True`` at construction keeps the
    whole connection read-only.
    """

    def __init__(
        self,
        path: str = ":memory:",
        *,
        readonly: bool = False,
        timeout: float = 5.0,
        **kwargs: Any,
    ):
        super().__init__(
            DatabaseConfig(db_type=DatabaseType.SQLITE, path=path, readonly=readonly, options=kwargs)
        )
        self._timeout = timeout
        self._conn: sqlite3.Connection | None = None

    def connect(self) -> None:
        path = self._config.path or ":memory:"
        try:
            conn = sqlite3.connect(
                path,
                timeout=self._timeout,
                check_same_thread=False,
                uri=path.startswith("file:"),
                **self._config.options,
            )
            conn.row_factory = sqlite3.Row
            conn.execute("PRAGMA foreign_keys = ON")
            self._set_query_only(conn, self._config.readonly)
        except sqlite3.Error as e:
            raise DatabaseConnectionError(f"Failed to connect to SQLite: {e}", cause=e) from e

        self._conn = conn
        self._connected = True

    def disconnect(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None
        self._connected = False

    def get_connection(self) -> Connection:
        """The shared connection, opened on first use."""
        if self._conn is None:
            self.connect()
        return self._conn

    @contextmanager
    def transaction(self) -> Iterator[Connection]:
        """Auto-committed unit, unless a transaction is already open.

        An open transaction belongs to whoever began it; the statement joins
        it and is neither committed nor rolled back here.
        """
        conn = self.get_connection()
        if not conn.in_transaction:
            with super().transaction() as unit:
                yield unit
            return
        logger.debug("sqlite.plain_query_in_open_transaction")
        yield conn

    def begin(self, options: TransactionOptions) -> Connection:
        """Issue an explicit ``BEGIN`` on the shared connection."""
        conn = self.get_connection()
        if options.isolation_level is not None:
            logger.debug("sqlite.isolation_level_ignored", isolation_level=options.isolation_level.value)
        try:
            if options.read_only:
                self._set_query_only(conn, True)
            conn.execute("BEGIN")
        except sqlite3.Error:
            if options.read_only:
                self._set_query_only(conn, self._config.readonly)
            raise
        return conn

    def finish(self, conn: Connection) -> None:
        """Discard a transaction left open and restore ``query_only``."""
        if conn.in_transaction:
            conn.rollback()
        self._set_query_only(conn, self._config.readonly)

    @staticmethod
    def _set_query_only(conn: Any, enabled: bool) -> None:
        conn.execute(f"PRAGMA query_only = {'ON' if enabled else 'OFF'}")


__all__ = [
    "SQLiteAdapter",
]
