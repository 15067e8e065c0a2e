"""SQLAlchemy plumbing behind ``ORMSession``.

* ``create_txsession_engine`` -- engine from a URL, SQLite foreign keys on.
* ``ManagedSession``          -- ``Session`` that keeps rows usable after commit.
* ``managed_session_factory`` -- ``sessionmaker`` producing ``ManagedSession``.
* ``bind_params``             -- ``?`` placeholders + positional values to a
  ``text()`` clause with named binds.

Tags:
    txsession, orm, sqlalchemy, session, engine

Doc-Types:
    api-reference
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.sql.elements import TextClause


def _enable_sqlite_foreign_keys(dbapi_connection: Any, _record: Any) -> None:
    cursor = dbapi_connection.cursor()
    try:
        cursor.execute("PRAGMA foreign_keys = ON")
    finally:
        cursor.close()


def create_txsession_engine(
    url: str = "sqlite:///txsession.db",
    *,
    echo: bool = False,
    pool_size: int | None = None,
    max_overflow: int | None = None,
    pool_timeout: int | None = None,
    **kwargs: Any,
) -> Engine:
    """Build the engine an ``ORMSession`` runs on.

    Parameters
    ----------
    url:
        Any SQLAlchemy URL.
    echo:
        Log every statement through SQLAlchemy's logger.
    pool_size, max_overflow, pool_timeout:
        Queue-pool sizing; not applied to SQLite, whose pool SQLAlchemy
        picks itself.
    **kwargs:
        Passed to ``sqlalchemy.create_engine`` unchanged.
    """
    if make_url(url).get_backend_name() == "sqlite":
        kwargs.setdefault("connect_args", {"check_same_thread": False})
        engine = create_engine(url, echo=echo, **kwargs)
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        return engine

    sizing = {"pool_size": pool_size, "max_overflow": max_overflow, "pool_timeout": pool_timeout}
    kwargs.update({k: v for k, v in sizing.items() if v is not None})
    return create_engine(url, echo=echo, **kwargs)


class ManagedSession(Session):
    """``Session`` defaulting to ``expire_on_commit=False``.

    Rows returned from work stay readable after ``transaction`` has
    committed and closed the session.
    """

    def __init__(self, bind: Engine | None = None, *, expire_on_commit: bool = False, **kwargs: Any) -> None:
        super().__init__(bind=bind, expire_on_commit=expire_on_commit, **kwargs)


def managed_session_factory(engine: Engine) -> sessionmaker[ManagedSession]:
    """``sessionmaker`` over *engine* producing :class:`ManagedSession`."""
    return sessionmaker(bind=engine, class_=ManagedSession, expire_on_commit=False)


def bind_params(sql: str, params: Sequence[Any]) -> tuple[TextClause, dict[str, Any]]:
    """Build a ``text()`` clause and its bind mapping.

    A single mapping argument is used as named binds unchanged.  Otherwise
    each ``?`` is rewritten to ``:p0``, ``:p1``, … in order.  ``?`` inside
    string literals is rewritten too, so literals containing ``?`` must be
    passed as parameters.
    """
    if len(params) == 1 and isinstance(params[0], Mapping):
        return text(sql), dict(params[0])
    if not params:
        return text(sql), {}

    rewritten, idx = [], 0
    for ch in sql:
        if ch == "?":
            rewritten.append(f":p{idx}")
            idx += 1
        else:
            rewritten.append(ch)
    return text("".join(rewritten)), {f"p{i}": v for i, v in enumerate(params)}
