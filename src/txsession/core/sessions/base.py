"""Session base class: the begin / work / commit-or-rollback template.

Manifesto:
    Callers should be able to run a unit of work inside a transaction
    without knowing whether a raw DB-API driver or SQLAlchemy sits
    underneath.  The transaction handle travels explicitly inside a
    :class:`~txsession.core.context.TxContext`: ``transaction()`` hands the
    work a child context carrying the handle, and every query operation
    takes a context as its first argument.  Nothing is looked up from
    ambient state.

Features:
    - One begin and one commit or rollback per ``transaction()`` call
    - Rollback failures are logged and discarded; the work's exception wins
    - Begin and commit failures propagate exactly as the client raised them
    - Client resources released on every exit path
    - Query routing: handle of this backend → in-flight transaction,
      no handle → plain client

Tags:
    txsession, session, transaction, template-method

Doc-Types:
    api-reference
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any, ClassVar, TypeVar

from txsession.core.context import (
    DEFAULT_TX_OPTIONS,
    NO_TRANSACTION,
    ExecResult,
    TransactionHandle,
    TransactionOptions,
    TxContext,
)
from txsession.core.errors import TransactionClosedError
from txsession.logging import get_logger, push_context

logger = get_logger(__name__)

T = TypeVar("T")


class Session(ABC):
    """
    Transactional session bound to one client and one set of options.

    Subclasses provide the backend primitives (``_begin``, ``_commit``,
    ``_rollback``, ``_release``) and the three query operations.
    """

    handle_type: ClassVar[type[TransactionHandle]] = TransactionHandle

    def __init__(
        self,
        driver: str,
        client: Any,
        tx_options: TransactionOptions | None = None,
        base_context: TxContext | None = None,
    ):
        self._driver = driver
        self._client = client
        self._tx_options = tx_options or DEFAULT_TX_OPTIONS
        self._base_context = base_context or NO_TRANSACTION

    @property
    def driver(self) -> str:
        return self._driver

    @property
    def client(self) -> Any:
        return self._client

    @property
    def tx_options(self) -> TransactionOptions:
        return self._tx_options

    @property
    def base_context(self) -> TxContext:
        return self._base_context

    # --- transaction ---

    def transaction(self, ctx: TxContext | None, work: Callable[[TxContext], T]) -> T:
        """Run *work* inside a transaction and return its result.

        ``work`` receives a child of *ctx* (or of the base context when
        *ctx* is ``None``) carrying the new transaction handle.  If it
        raises, the transaction is rolled back and the exception re-raised
        unchanged; otherwise the transaction is committed.
        """
        ctx = self._resolve(ctx)
        if ctx.in_transaction:
            logger.warning(
                "transaction.nested",
                driver=self._driver,
                outer_tx_id=ctx.transaction.tx_id,
            )

        handle = self._begin()
        token = push_context(driver=self._driver, tx_id=handle.tx_id)
        logger.debug("transaction.begin", **self._tx_options.to_dict())
        try:
            try:
                result = work(ctx.with_transaction(handle))
            except Exception as exc:
                self._rollback_quietly(handle, exc)
                raise
            self._commit(handle)
            logger.debug("transaction.commit")
            return result
        finally:
            handle.mark_finished()
            self._release_quietly(handle)
            token.restore()

    def _rollback_quietly(self, handle: TransactionHandle, exc: Exception) -> None:
        try:
            self._rollback(handle)
        except Exception as rollback_exc:
            logger.warning(
                "transaction.rollback_failed",
                error=str(rollback_exc),
                error_type=type(rollback_exc).__name__,
                work_error_type=type(exc).__name__,
            )
        else:
            logger.info("transaction.rollback", work_error_type=type(exc).__name__)

    def _release_quietly(self, handle: TransactionHandle) -> None:
        try:
            self._release(handle)
        except Exception as release_exc:
            logger.warning(
                "transaction.release_failed",
                error=str(release_exc),
                error_type=type(release_exc).__name__,
            )

    @abstractmethod
    def _begin(self) -> TransactionHandle:
        """Begin a transaction on the client using ``self.tx_options``."""
        ...

    @abstractmethod
    def _commit(self, handle: TransactionHandle) -> None:
        ...

    @abstractmethod
    def _rollback(self, handle: TransactionHandle) -> None:
        ...

    @abstractmethod
    def _release(self, handle: TransactionHandle) -> None:
        """Give the client resources back; discards a transaction left open."""
        ...

    # --- query routing ---

    def _resolve(self, ctx: TxContext | None) -> TxContext:
        return self._base_context if ctx is None else ctx

    def _active_handle(self, ctx: TxContext | None) -> TransactionHandle | None:
        """Handle the query should run on, or ``None`` for the plain client."""
        handle = self._resolve(ctx).transaction
        if handle is None:
            return None
        if not isinstance(handle, self.handle_type):
            logger.warning(
                "query.foreign_handle",
                driver=self._driver,
                handle_type=type(handle).__name__,
            )
            return None
        if handle.finished:
            raise TransactionClosedError(handle.tx_id)
        return handle

    @abstractmethod
    def exec_query(self, ctx: TxContext | None, query: str, *params: Any) -> ExecResult:
        """Execute a write statement."""
        ...

    @abstractmethod
    def query_row(self, ctx: TxContext | None, query: str, *params: Any) -> Any:
        """Return the first row of *query*, or ``None``."""
        ...

    @abstractmethod
    def query_rows(self, ctx: TxContext | None, query: str, *params: Any) -> list[Any]:
        """Return every row of *query*."""
        ...

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(driver={self._driver!r})"


__all__ = [
    "Session",
]
