"""Raw-driver clients accepted by ``RDBMSSession``.

Every adapter turns :class:`~txsession.core.context.TransactionOptions`
into its driver's own calls inside ``begin()`` and undoes them in
``finish()``.  Vendor drivers are imported when an adapter connects, so
only the backends in use need installing::

    pip install txsession[postgresql]   # psycopg2-binary
    pip install txsession[mysql]        # mysql-connector-python

Layout::

    base.py        DatabaseAdapter: begin / finish / transaction()
    sqlite.py      SQLiteAdapter, stdlib sqlite3, one shared connection
    postgresql.py  PostgreSQLAdapter, psycopg2 ThreadedConnectionPool
    mysql.py       MySQLAdapter, mysql.connector pooling
    registry.py    identifier -> adapter class, get_adapter()
    types.py       DatabaseType, DatabaseConfig

Guardrails:
    ❌ ``cursor.execute("SELECT * FROM t WHERE id=" + user_input)``
    ✅ ``session.query_row(ctx, "SELECT * FROM t WHERE id=?", user_input)``
"""

from txsession.core.protocols import Connection

from .base import DatabaseAdapter
from .mysql import MySQLAdapter
from .postgresql import PostgreSQLAdapter
from .registry import AdapterRegistry, adapter_registry, get_adapter
from .sqlite import SQLiteAdapter
from .types import DatabaseConfig, DatabaseType

__all__ = [
    # Types
    "DatabaseType",
    "DatabaseConfig",
    # Protocols / Abstractions
    "Connection",
    # Base class
    "DatabaseAdapter",
    # Implementations
    "SQLiteAdapter",
    "PostgreSQLAdapter",
    "MySQLAdapter",
    # Registry
    "AdapterRegistry",
    "adapter_registry",
    "get_adapter",
]
