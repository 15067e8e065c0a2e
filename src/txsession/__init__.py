"""txsession - one transactional-session API over raw SQL drivers and SQLAlchemy.

Usage:
    from txsession import new_session, NO_TRANSACTION
    from txsession.core.adapters import SQLiteAdapter

    session = new_session("sqlite", SQLiteAdapter("app.db"))

    def work(ctx):
        session.exec_query(ctx, "UPDATE accounts SET balance = balance - ? WHERE id = ?", 10, 1)
        session.exec_query(ctx, "UPDATE accounts SET balance = balance + ? WHERE id = ?", 10, 2)

    session.transaction(NO_TRANSACTION, work)
"""

from txsession.core import (
    NO_TRANSACTION,
    ExecResult,
    IsolationLevel,
    ORMSession,
    RDBMSSession,
    Session,
    TransactionOptions,
    TxContext,
    new_session,
    transactional,
)

__version__ = "0.1.0"

__all__ = [
    "NO_TRANSACTION",
    "ExecResult",
    "IsolationLevel",
    "TransactionOptions",
    "TxContext",
    "Session",
    "RDBMSSession",
    "ORMSession",
    "new_session",
    "transactional",
]
