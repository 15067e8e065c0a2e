"""Session over a raw DB-API driver (SQLite, PostgreSQL, MySQL)."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager, nullcontext
from dataclasses import dataclass
from typing import Any, ContextManager, TypeVar

from txsession.core.adapters.base import DatabaseAdapter
from txsession.core.context import ExecResult, TransactionHandle, TransactionOptions, TxContext
from txsession.core.errors import QueryError
from txsession.core.protocols import Connection
from txsession.core.sessions.base import Session

R = TypeVar("R")


@dataclass
class RawTransaction(TransactionHandle):
    """In-flight transaction on one DB-API connection."""

    connection: Any = None


class RDBMSSession(Session):
    """
    Session whose client is a :class:`DatabaseAdapter`.

    Parameters are bound by the driver, in the driver's paramstyle
    (``?`` for sqlite3, ``%s`` for psycopg2 and mysql.connector).
    """

    handle_type = RawTransaction

    def __init__(
        self,
        driver: str,
        client: DatabaseAdapter,
        tx_options: TransactionOptions | None = None,
        base_context: TxContext | None = None,
    ):
        super().__init__(driver, client, tx_options, base_context)

    def _begin(self) -> RawTransaction:
        conn = self._client.begin(self._tx_options)
        return RawTransaction(driver=self._driver, connection=conn)

    def _commit(self, handle: RawTransaction) -> None:
        handle.connection.commit()

    def _rollback(self, handle: RawTransaction) -> None:
        handle.connection.rollback()

    def _release(self, handle: RawTransaction) -> None:
        self._client.finish(handle.connection)

    def _target(self, handle: RawTransaction | None) -> ContextManager[Connection]:
        if handle is not None:
            return nullcontext(handle.connection)
        return self._client.transaction()

    def _execute(
        self,
        ctx: TxContext | None,
        query: str,
        params: tuple[Any, ...],
        consume: Callable[[Any], R],
    ) -> R:
        handle = self._active_handle(ctx)
        with self._target(handle) as conn, _cursor(conn) as cursor:
            try:
                if params:
                    cursor.execute(query, params)
                else:
                    cursor.execute(query)
            except Exception as e:
                raise QueryError(f"Query failed: {e}", cause=e).with_context(
                    driver=self._driver,
                    tx_id=handle.tx_id if handle else None,
                    query=query,
                ) from e
            return consume(cursor)

    def exec_query(self, ctx: TxContext | None, query: str, *params: Any) -> ExecResult:
        return self._execute(
            ctx,
            query,
            params,
            lambda cursor: ExecResult(rows_affected=cursor.rowcount, last_insert_id=cursor.lastrowid),
        )

    def query_row(self, ctx: TxContext | None, query: str, *params: Any) -> Any:
        return self._execute(ctx, query, params, lambda cursor: cursor.fetchone())

    def query_rows(self, ctx: TxContext | None, query: str, *params: Any) -> list[Any]:
        return self._execute(ctx, query, params, lambda cursor: list(cursor.fetchall()))


@contextmanager
def _cursor(conn: Connection) -> Iterator[Any]:
    cursor = conn.cursor()
    try:
        yield cursor
    finally:
        cursor.close()


__all__ = [
    "RawTransaction",
    "RDBMSSession",
]
