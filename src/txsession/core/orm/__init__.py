"""SQLAlchemy layer -- the client behind ``ORMSession``.

Modules
-------
session     Engine factory, ManagedSession, positional parameter binding

Tags:
    txsession, orm, sqlalchemy
"""

from __future__ import annotations

from txsession.core.orm.session import (
    ManagedSession,
    bind_params,
    create_txsession_engine,
    managed_session_factory,
)

__all__ = [
    "create_txsession_engine",
    "ManagedSession",
    "managed_session_factory",
    "bind_params",
]
