"""Contract every raw-driver client fulfils for ``RDBMSSession``.

Manifesto:
    The raw session never imports a vendor module.  It asks an adapter to
    ``begin`` a transaction with pass-through
    :class:`~txsession.core.context.TransactionOptions`, commits or rolls
    back the connection it got back, then hands that connection to
    ``finish``.  Plain queries go through ``transaction()``, a short
    auto-committed unit.

Features:
    - ``begin(options)`` / ``finish(conn)`` bracket one explicit transaction
    - ``transaction()`` context manager for single-statement units
    - Lazy ``connect()`` on first ``get_connection()``
    - ``with adapter:`` connects and disconnects

Tags:
    txsession, database, abstract-base, adapter-pattern

Doc-Types:
    api-reference
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator
from contextlib import contextmanager

from txsession.core.context import TransactionOptions
from txsession.core.protocols import Connection

from .types import DatabaseConfig, DatabaseType


class DatabaseAdapter(ABC):
    """
    Connection source for one database.

    Subclasses own the driver: how connections are opened, pooled and
    returned, and how transaction options reach the server.
    """

    def __init__(self, config: DatabaseConfig):
        self._config = config
        self._connected = False

    @property
    def config(self) -> DatabaseConfig:
        return self._config

    @property
    def db_type(self) -> DatabaseType:
        return self._config.db_type

    @property
    def is_connected(self) -> bool:
        return self._connected

    @abstractmethod
    def connect(self) -> None:
        """Open the connection or pool."""
        ...

    @abstractmethod
    def disconnect(self) -> None:
        """Close the connection or pool; safe to call when not connected."""
        ...

    @abstractmethod
    def get_connection(self) -> Connection:
        """Check out a connection, connecting first if needed."""
        ...

    def release_connection(self, conn: Connection) -> None:
        """Give back a connection from ``get_connection``."""
        return None

    @abstractmethod
    def begin(self, options: TransactionOptions) -> Connection:
        """Start a transaction and return the connection bound to it.

        On failure nothing stays checked out.
        """
        ...

    def finish(self, conn: Connection) -> None:
        """Reset per-transaction options on *conn* and release it.

        Called once per ``begin``, after commit or rollback, or after the
        work was interrupted; adapters roll back a transaction still open.
        """
        self.release_connection(conn)

    @contextmanager
    def transaction(self) -> Iterator[Connection]:
        """Auto-committed unit: commit on success, rollback on error."""
        conn = self.get_connection()
        try:
            yield conn
            conn.commit()
        except Exception:
            # Also covers a failed commit
            conn.rollback()
            raise
        finally:
            self.release_connection(conn)

    def __enter__(self) -> DatabaseAdapter:
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.disconnect()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._config.safe_url()!r})"


__all__ = [
    "DatabaseAdapter",
]
