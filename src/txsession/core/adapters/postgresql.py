"""PostgreSQL adapter over a ``psycopg2`` thread-safe connection pool.

psycopg2 opens a transaction implicitly on the first statement, so
``begin()`` only sets the session characteristics (isolation level,
read-only) on a pooled connection and ``finish()`` puts the server
defaults back before the connection returns to the pool.

``psycopg2`` is imported on ``connect()``; without it a
:class:`~txsession.core.errors.ConfigError` names the package to install.
"""

from __future__ import annotations

from typing import Any

from txsession.core.context import TransactionOptions
from txsession.core.errors import ConfigError, DatabaseConnectionError
from txsession.core.protocols import Connection

from .base import DatabaseAdapter
from .types import DatabaseConfig, DatabaseType


def _import_psycopg2() -> Any:
    try:
        import psycopg2
        import psycopg2.pool
    except ImportError:
        raise ConfigError(
            "psycopg2 is required for PostgreSQL. Install with: pip install txsession[postgresql]"
        ) from None
    return psycopg2


class PostgreSQLAdapter(DatabaseAdapter):
    """PostgreSQL client handing out pooled connections, one per transaction."""

    def __init__(
        self,
        host: str = "localhost",
        port: int = 5432,
        database: str = "",
        username: str | None = None,
        password: str | None = None,
        *,
        pool_size: int = 5,
        **kwargs: Any,
    ):
        super().__init__(
            DatabaseConfig(
                db_type=DatabaseType.POSTGRESQL,
                host=host,
                port=port,
                database=database,
                username=username,
                password=password,
                pool_size=pool_size,
                options=kwargs,
            )
        )
        self._pool: Any = None

    def connect(self) -> None:
        psycopg2 = _import_psycopg2()
        cfg = self._config
        try:
            self._pool = psycopg2.pool.ThreadedConnectionPool(
                minconn=1,
                maxconn=cfg.pool_size,
                host=cfg.host,
                port=cfg.port,
                dbname=cfg.database,
                user=cfg.username,
                password=cfg.password,
                connect_timeout=cfg.connect_timeout,
                **cfg.options,
            )
        except psycopg2.Error as e:
            raise DatabaseConnectionError(f"Failed to connect to PostgreSQL: {e}", cause=e) from e
        self._connected = True

    def disconnect(self) -> None:
        if self._pool is not None:
            self._pool.closeall()
            self._pool = None
        self._connected = False

    def get_connection(self) -> Connection:
        if self._pool is None:
            self.connect()
        return self._pool.getconn()

    def release_connection(self, conn: Connection) -> None:
        if self._pool is not None:
            self._pool.putconn(conn)

    def begin(self, options: TransactionOptions) -> Connection:
        """Check out a connection and apply the transaction characteristics."""
        conn = self.get_connection()
        if options.isolation_level is None and not options.read_only:
            return conn
        try:
            conn.set_session(
                isolation_level=options.isolation_level.value if options.isolation_level else None,
                readonly=True if options.read_only else None,
            )
        except Exception:
            self.release_connection(conn)
            raise
        return conn

    def finish(self, conn: Connection) -> None:
        """Reset session characteristics and return the connection to the pool."""
        try:
            # No-op when idle; ends a transaction a failed commit left open
            conn.rollback()
            conn.set_session(isolation_level="DEFAULT", readonly="DEFAULT")
        finally:
            self.release_connection(conn)


__all__ = [
    "PostgreSQLAdapter",
]
