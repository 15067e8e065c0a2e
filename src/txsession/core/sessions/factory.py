"""Session factory: driver identifier → session implementation.

Raw-SQL identifiers are whatever the adapter registry knows
(``sqlite``, ``postgres``, ``postgresql``, ``mysql`` by default); each
requires a client of the registered adapter class.  ``sqlalchemy`` requires
a SQLAlchemy ``Engine`` or ``sessionmaker``.  Anything else is a
configuration error raised at construction.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from txsession.core.adapters.registry import adapter_registry
from txsession.core.context import TransactionOptions, TxContext
from txsession.core.errors import ClientTypeError, UnsupportedDriverError
from txsession.core.sessions.base import Session
from txsession.core.sessions.orm import ORMSession
from txsession.core.sessions.rdbms import RDBMSSession
from txsession.logging import get_logger

logger = get_logger(__name__)

ORM_DRIVER = "sqlalchemy"


def is_supported_sql_driver(driver: str) -> bool:
    """Whether *driver* names a raw-SQL adapter."""
    return adapter_registry.adapter_class(driver) is not None


def supported_drivers() -> list[str]:
    """Every identifier ``new_session`` accepts."""
    return sorted([*adapter_registry.list_adapters(), ORM_DRIVER])


def new_session(
    driver: str,
    client: Any,
    tx_options: TransactionOptions | None = None,
    base_context: TxContext | None = None,
) -> Session:
    """
    Build the session implementation for *driver* bound to *client*.

    Raises:
        UnsupportedDriverError: *driver* is not a known identifier.
        ClientTypeError: *client* is not the type *driver* implies.
    """
    name = driver.lower()

    if is_supported_sql_driver(name):
        expected = adapter_registry.adapter_class(name)
        if not isinstance(client, expected):
            error = ClientTypeError(name, expected.__name__, client)
            logger.critical("session.client_type_mismatch", driver=name, error=error.message)
            raise error
        session: Session = RDBMSSession(name, client, tx_options, base_context)
    elif name == ORM_DRIVER:
        if not isinstance(client, (Engine, sessionmaker)):
            error = ClientTypeError(name, "Engine or sessionmaker", client)
            logger.critical("session.client_type_mismatch", driver=name, error=error.message)
            raise error
        session = ORMSession(name, client, tx_options, base_context)
    else:
        logger.critical("session.unsupported_driver", driver=driver)
        raise UnsupportedDriverError(driver, supported_drivers())

    logger.debug("session.created", driver=name, session_type=type(session).__name__)
    return session


__all__ = [
    "ORM_DRIVER",
    "is_supported_sql_driver",
    "supported_drivers",
    "new_session",
]
