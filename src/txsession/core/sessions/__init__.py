"""Transactional sessions over a raw SQL driver or SQLAlchemy.

Architecture::

    Session (base.py)            begin → work(ctx) → commit | rollback
        |-- RDBMSSession         DatabaseAdapter client (sqlite3/psycopg2/mysql)
        |-- ORMSession           SQLAlchemy Engine / sessionmaker client

    new_session (factory.py)     driver identifier → implementation
    transactional (decorators.py)

Usage::

    session = new_session("sqlite", SQLiteAdapter("app.db"))

    def work(ctx):
        session.exec_query(ctx, "UPDATE t SET x = ?", 1)
        return session.query_row(ctx, "SELECT x FROM t")

    row = session.transaction(None, work)
"""

from txsession.core.sessions.base import Session
from txsession.core.sessions.decorators import transactional
from txsession.core.sessions.factory import (
    ORM_DRIVER,
    is_supported_sql_driver,
    new_session,
    supported_drivers,
)
from txsession.core.sessions.orm import ORMSession, ORMTransaction
from txsession.core.sessions.rdbms import RawTransaction, RDBMSSession

__all__ = [
    "Session",
    "RDBMSSession",
    "RawTransaction",
    "ORMSession",
    "ORMTransaction",
    "ORM_DRIVER",
    "new_session",
    "is_supported_sql_driver",
    "supported_drivers",
    "transactional",
]
