"""Session over SQLAlchemy (``Engine`` or ``sessionmaker``)."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, TypeVar

from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session as SASession
from sqlalchemy.orm import sessionmaker

from txsession.core.context import ExecResult, TransactionHandle, TransactionOptions, TxContext
from txsession.core.errors import QueryError
from txsession.core.orm.session import bind_params, managed_session_factory
from txsession.core.sessions.base import Session
from txsession.logging import get_logger

logger = get_logger(__name__)

R = TypeVar("R")


@dataclass
class ORMTransaction(TransactionHandle):
    """In-flight transaction on one SQLAlchemy ``Session``."""

    session: SASession | None = None


class ORMSession(Session):
    """
    Session whose client is a SQLAlchemy ``Engine`` or ``sessionmaker``.

    Statements run through ``Session.execute(text(...))``; ``?``
    placeholders are rewritten to named binds, or a single mapping argument
    is used as the bind dict.
    """

    handle_type = ORMTransaction

    def __init__(
        self,
        driver: str,
        client: Engine | sessionmaker,
        tx_options: TransactionOptions | None = None,
        base_context: TxContext | None = None,
    ):
        super().__init__(driver, client, tx_options, base_context)
        if isinstance(client, Engine):
            self._factory = managed_session_factory(client)
        else:
            self._factory = client

    def _execution_options(self, session: SASession) -> dict[str, Any]:
        options: dict[str, Any] = {}
        if self._tx_options.isolation_level is not None:
            options["isolation_level"] = self._tx_options.isolation_level.value
        if self._tx_options.read_only:
            dialect = session.get_bind().dialect.name
            if dialect == "postgresql":
                options["postgresql_readonly"] = True
            else:
                logger.debug("orm.read_only_unsupported", dialect=dialect)
        return options

    def _begin(self) -> ORMTransaction:
        session = self._factory()
        try:
            session.begin()
            # Checking out the connection here surfaces connect errors at begin
            session.connection(execution_options=self._execution_options(session) or None)
        except Exception:
            session.close()
            raise
        return ORMTransaction(driver=self._driver, session=session)

    def _commit(self, handle: ORMTransaction) -> None:
        handle.session.commit()

    def _rollback(self, handle: ORMTransaction) -> None:
        handle.session.rollback()

    def _release(self, handle: ORMTransaction) -> None:
        handle.session.close()

    @contextmanager
    def _target(self, handle: ORMTransaction | None) -> Iterator[SASession]:
        if handle is not None:
            yield handle.session
            return
        with self._factory() as session, session.begin():
            yield session

    def _execute(
        self,
        ctx: TxContext | None,
        query: str,
        params: tuple[Any, ...],
        consume: Callable[[Any], R],
    ) -> R:
        handle = self._active_handle(ctx)
        stmt, binds = bind_params(query, params)
        with self._target(handle) as session:
            try:
                result = session.execute(stmt, binds)
            except SQLAlchemyError as e:
                raise QueryError(f"Query failed: {e}", cause=e).with_context(
                    driver=self._driver,
                    tx_id=handle.tx_id if handle else None,
                    query=query,
                ) from e
            return consume(result)

    def exec_query(self, ctx: TxContext | None, query: str, *params: Any) -> ExecResult:
        return self._execute(
            ctx,
            query,
            params,
            lambda result: ExecResult(rows_affected=result.rowcount, last_insert_id=result.lastrowid),
        )

    def query_row(self, ctx: TxContext | None, query: str, *params: Any) -> Any:
        return self._execute(ctx, query, params, lambda result: result.first())

    def query_rows(self, ctx: TxContext | None, query: str, *params: Any) -> list[Any]:
        return self._execute(ctx, query, params, lambda result: list(result.all()))


__all__ = [
    "ORMTransaction",
    "ORMSession",
]
