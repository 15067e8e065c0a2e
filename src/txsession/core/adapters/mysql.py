"""MySQL / MariaDB adapter over ``mysql.connector`` connection pooling.

Placeholders use the driver's ``%s`` style.  ``begin()`` issues
``START TRANSACTION`` with the requested isolation level and access mode;
closing a pooled connection hands it back to the pool.  Pooled connections
set ``consume_results`` so rows a query leaves unread are discarded when
its cursor closes.

``mysql.connector`` is imported on ``connect()``; without it a
:class:`~txsession.core.errors.ConfigError` names the package to install.
"""

from __future__ import annotations

from typing import Any

from txsession.core.context import TransactionOptions
from txsession.core.errors import ConfigError, DatabaseConnectionError
from txsession.core.protocols import Connection

from .base import DatabaseAdapter
from .types import DatabaseConfig, DatabaseType

POOL_NAME = "txsession_mysql_pool"


def _import_pooling() -> Any:
    try:
        from mysql.connector import pooling
    except ImportError:
        raise ConfigError(
            "mysql-connector-python is required for MySQL. Install with: pip install txsession[mysql]"
        ) from None
    return pooling


class MySQLAdapter(DatabaseAdapter):
    """MySQL client handing out pooled connections with autocommit off."""

    def __init__(
        self,
        host: str = "localhost",
        port: int = 3306,
        database: str = "",
        username: str | None = None,
        password: str | None = None,
        *,
        pool_size: int = 5,
        charset: str = "utf8mb4",
        **kwargs: Any,
    ):
        super().__init__(
            DatabaseConfig(
                db_type=DatabaseType.MYSQL,
                host=host,
                port=port,
                database=database,
                username=username,
                password=password,
                pool_size=pool_size,
                options={"consume_results": True, **kwargs, "charset": charset},
            )
        )
        self._pool: Any = None

    def connect(self) -> None:
        pooling = _import_pooling()
        cfg = self._config
        try:
            self._pool = pooling.MySQLConnectionPool(
                pool_name=POOL_NAME,
                pool_size=cfg.pool_size,
                host=cfg.host,
                port=cfg.port,
                database=cfg.database,
                user=cfg.username,
                password=cfg.password,
                connect_timeout=cfg.connect_timeout,
                autocommit=False,
                **cfg.options,
            )
        except Exception as e:
            raise DatabaseConnectionError(f"Failed to connect to MySQL: {e}", cause=e) from e
        self._connected = True

    def disconnect(self) -> None:
        """Drop the pool; idle pooled connections close when collected."""
        self._pool = None
        self._connected = False

    def get_connection(self) -> Connection:
        if self._pool is None:
            self.connect()
        return self._pool.get_connection()

    def release_connection(self, conn: Connection) -> None:
        conn.close()

    def begin(self, options: TransactionOptions) -> Connection:
        """Check out a connection and ``START TRANSACTION`` with the given options."""
        conn = self.get_connection()
        try:
            conn.start_transaction(
                isolation_level=options.isolation_level.value if options.isolation_level else None,
                readonly=True if options.read_only else None,
            )
        except Exception:
            self.release_connection(conn)
            raise
        return conn

    def finish(self, conn: Connection) -> None:
        """Discard a transaction left open and return the connection to the pool."""
        try:
            if conn.in_transaction:
                conn.rollback()
        finally:
            self.release_connection(conn)


__all__ = [
    "MySQLAdapter",
]
