"""
Factory functions that build a client or a whole session from settings.

Features:
    - ``create_client()`` — SQLAlchemy engine for ``sqlalchemy``, a
      registry adapter for raw-SQL drivers (connection parameters parsed
      from ``database_url``)
    - ``create_session()`` — ``new_session`` wired with the settings'
      driver, client and transaction options

Tags:
    txsession, configuration, factory-pattern, sqlalchemy

Doc-Types:
    api-reference
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError

from txsession.core.adapters.registry import adapter_registry, get_adapter
from txsession.core.errors import InvalidConfigError
from txsession.core.orm.session import create_txsession_engine
from txsession.core.sessions.base import Session
from txsession.core.sessions.factory import ORM_DRIVER, new_session

if TYPE_CHECKING:
    from .settings import TxSessionSettings


def create_client(settings: TxSessionSettings) -> Any:
    """Create the client handle *settings.driver* expects."""
    if settings.driver == ORM_DRIVER:
        return create_txsession_engine(
            settings.database_url,
            echo=settings.echo,
            pool_size=settings.pool_size,
            max_overflow=settings.max_overflow,
        )

    try:
        url = make_url(settings.database_url)
    except ArgumentError as e:
        raise InvalidConfigError("database_url", settings.database_url, f"Invalid database_url: {e}") from e

    backend = url.get_backend_name()
    if adapter_registry.adapter_class(backend) is not adapter_registry.adapter_class(settings.driver):
        raise InvalidConfigError(
            "database_url",
            url.render_as_string(hide_password=True),
            f"database_url backend {backend!r} does not match driver {settings.driver!r}",
        )

    if backend == "sqlite":
        return get_adapter(settings.driver, path=url.database or ":memory:")

    kwargs: dict[str, Any] = {
        "host": url.host or "localhost",
        "database": url.database or "",
        "username": url.username,
        "password": url.password,
        "pool_size": settings.pool_size,
    }
    if url.port:
        kwargs["port"] = url.port
    return get_adapter(settings.driver, **kwargs)


def create_session(settings: TxSessionSettings) -> Session:
    """Build a ready-to-use session from *settings*."""
    return new_session(
        settings.driver,
        create_client(settings),
        settings.transaction_options(),
    )


__all__ = [
    "create_client",
    "create_session",
]
