"""
Canonical protocol definitions for txsession.

Manifesto:
    Protocols define contracts without inheritance. A ``sqlite3``,
    ``psycopg2`` or ``mysql.connector`` connection satisfies
    :class:`Connection` as-is, and both session variants satisfy
    :class:`TransactionalSession`, so callers depend on shape rather than
    on a backend.

Architecture:
    ::

        protocols.py
        ├── Cursor                — DB-API 2.0 cursor subset
        ├── Connection            — DB-API 2.0 connection subset
        └── TransactionalSession  — transaction / exec_query / query_row / query_rows

Tags:
    protocol, connection, session, contracts
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, Protocol, TypeVar, runtime_checkable

if TYPE_CHECKING:
    from txsession.core.context import ExecResult, TxContext

T = TypeVar("T")


@runtime_checkable
class Cursor(Protocol):
    """Minimal DB-API 2.0 cursor used by the raw session."""

    rowcount: int

    def execute(self, sql: str, params: Any = ()) -> Any:
        """Execute one statement."""
        ...

    def fetchone(self) -> Any:
        """Fetch the next row, or ``None``."""
        ...

    def fetchall(self) -> list:
        """Fetch all remaining rows."""
        ...

    def close(self) -> None:
        """Close the cursor."""
        ...


@runtime_checkable
class Connection(Protocol):
    """
    Minimal SYNCHRONOUS DB-API 2.0 connection.

    Implementations:
        sqlite3.Connection, psycopg2 connection, mysql.connector connection
    """

    def cursor(self) -> Any:
        """Open a new cursor."""
        ...

    def commit(self) -> None:
        """Commit current transaction."""
        ...

    def rollback(self) -> None:
        """Rollback current transaction."""
        ...

    def close(self) -> None:
        """Close (or return to pool) the connection."""
        ...


@runtime_checkable
class TransactionalSession(Protocol):
    """
    Capability set shared by every session backend.

    Query operations take the context explicitly: a context produced inside
    ``transaction`` routes them to the in-flight transaction, any other
    context routes them to the plain client.
    """

    def transaction(self, ctx: TxContext | None, work: Callable[[TxContext], T]) -> T:
        """Run *work* inside a transaction; commit on return, roll back on raise."""
        ...

    def exec_query(self, ctx: TxContext | None, query: str, *params: Any) -> ExecResult:
        """Execute a write statement."""
        ...

    def query_row(self, ctx: TxContext | None, query: str, *params: Any) -> Any:
        """Return the first row of a query, or ``None``."""
        ...

    def query_rows(self, ctx: TxContext | None, query: str, *params: Any) -> list[Any]:
        """Return all rows of a query."""
        ...


__all__ = [
    "Cursor",
    "Connection",
    "TransactionalSession",
]
