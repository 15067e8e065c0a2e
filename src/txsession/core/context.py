"""Transaction options, handles and the explicit transaction context.

A :class:`TxContext` is passed by value into every query operation. It
either carries the live :class:`TransactionHandle` of an enclosing
``Session.transaction`` call or nothing (:data:`NO_TRANSACTION`), in which
case the operation runs against the plain client.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any


class IsolationLevel(str, Enum):
    """SQL standard isolation levels, spelled the way drivers accept them."""

    READ_UNCOMMITTED = "READ UNCOMMITTED"
    READ_COMMITTED = "READ COMMITTED"
    REPEATABLE_READ = "REPEATABLE READ"
    SERIALIZABLE = "SERIALIZABLE"


@dataclass(frozen=True)
class TransactionOptions:
    """
    Options handed to the client when a transaction begins.

    ``isolation_level=None`` leaves the server default in place.
    """

    isolation_level: IsolationLevel | None = None
    read_only: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "isolation_level": self.isolation_level.value if self.isolation_level else None,
            "read_only": self.read_only,
        }


DEFAULT_TX_OPTIONS = TransactionOptions()


def _generate_tx_id() -> str:
    """Generate a short transaction ID (8 hex chars)."""
    return uuid.uuid4().hex[:8]


@dataclass
class TransactionHandle:
    """Backend-agnostic part of an in-flight transaction."""

    driver: str
    tx_id: str = field(default_factory=_generate_tx_id)
    finished: bool = False

    def mark_finished(self) -> None:
        self.finished = True


@dataclass(frozen=True)
class TxContext:
    """Per-call carrier of the active transaction handle, if any."""

    transaction: TransactionHandle | None = None

    @property
    def in_transaction(self) -> bool:
        return self.transaction is not None

    def with_transaction(self, handle: TransactionHandle) -> TxContext:
        """Derive a child context carrying *handle*."""
        return replace(self, transaction=handle)


NO_TRANSACTION = TxContext()


@dataclass(frozen=True)
class ExecResult:
    """Outcome of a write statement."""

    rows_affected: int
    last_insert_id: Any = None


__all__ = [
    "IsolationLevel",
    "TransactionOptions",
    "DEFAULT_TX_OPTIONS",
    "TransactionHandle",
    "TxContext",
    "NO_TRANSACTION",
    "ExecResult",
]
