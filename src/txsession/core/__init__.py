"""txsession core: contexts, errors, clients and sessions.

Modules
-------
context     TxContext, TransactionOptions, IsolationLevel, ExecResult
errors      TxSessionError hierarchy
protocols   Connection / TransactionalSession protocols
adapters    Raw-driver clients (SQLite, PostgreSQL, MySQL) + registry
orm         SQLAlchemy engine / session factory
sessions    Session, RDBMSSession, ORMSession, new_session, transactional
config      TxSessionSettings, create_client, create_session
"""

from txsession.core.context import (
    NO_TRANSACTION,
    ExecResult,
    IsolationLevel,
    TransactionHandle,
    TransactionOptions,
    TxContext,
)
from txsession.core.errors import (
    ClientTypeError,
    ConfigError,
    DatabaseError,
    QueryError,
    TransactionClosedError,
    TxSessionError,
    UnsupportedDriverError,
)
from txsession.core.sessions import (
    ORMSession,
    RDBMSSession,
    Session,
    new_session,
    transactional,
)

__all__ = [
    "NO_TRANSACTION",
    "ExecResult",
    "IsolationLevel",
    "TransactionHandle",
    "TransactionOptions",
    "TxContext",
    "TxSessionError",
    "ConfigError",
    "UnsupportedDriverError",
    "ClientTypeError",
    "DatabaseError",
    "QueryError",
    "TransactionClosedError",
    "Session",
    "RDBMSSession",
    "ORMSession",
    "new_session",
    "transactional",
]
