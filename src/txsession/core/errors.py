"""
Exception types raised by txsession itself.

Each error carries a category, a retryable flag and, when it wraps a
driver failure, that failure as ``cause``, so callers can route and log
without string matching.

Hierarchy:
    ::

        TxSessionError (category, retryable, retry_after, context, cause)
        ├── TransientError (retryable)
        │   └── DatabaseConnectionError
        ├── ConfigError
        │   ├── UnsupportedDriverError
        │   ├── ClientTypeError
        │   └── InvalidConfigError
        └── DatabaseError
            ├── QueryError
            └── TransactionClosedError

    Failures raised by the client while beginning or committing a
    transaction, and anything raised by caller work, are not wrapped: they
    reach the caller exactly as raised.

Tags:
    error-handling, exception-hierarchy, txsession

Doc-Types:
    api-reference
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Coarse classification used for routing and log fields."""

    DATABASE = "DATABASE"
    CONFIG = "CONFIG"
    INTERNAL = "INTERNAL"
    UNKNOWN = "UNKNOWN"


@dataclass
class ErrorContext:
    """
    Where an error happened.

    Attributes:
        driver: Driver identifier of the session involved
        tx_id: Transaction id, when the failure happened inside one
        query: SQL text that failed (bound values are never recorded)
        metadata: Anything else worth logging
    """

    driver: str | None = None
    tx_id: str | None = None
    query: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Set fields plus metadata, flattened for a log entry."""
        known = {f.name: getattr(self, f.name) for f in fields(self) if f.name != "metadata"}
        return {**{k: v for k, v in known.items() if v is not None}, **self.metadata}


class TxSessionError(Exception):
    """
    Root of every txsession error.

    Subclasses pick their defaults through ``default_category`` and
    ``default_retryable``; callers may still override both per instance.

    Examples:
        >>> TxSessionError("boom").category
        <ErrorCategory.INTERNAL: 'INTERNAL'>
        >>> TxSessionError("boom", retryable=True).retryable
        True
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL
    default_retryable: bool = False

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        retryable: bool | None = None,
        retry_after: int | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.retryable = self.default_retryable if retryable is None else retryable
        self.retry_after = retry_after
        self.context = context if context is not None else ErrorContext()
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> TxSessionError:
        """
        Attach context and return ``self``.

        Keys naming an :class:`ErrorContext` field set it; anything else
        lands in ``metadata``.

        Usage:
            raise QueryError("insert failed").with_context(driver="mysql", query=sql)
        """
        known = {f.name for f in fields(self.context)} - {"metadata"}
        for key, value in kwargs.items():
            if key in known:
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Serializable summary for structured logs."""
        data: dict[str, Any] = {
            "error_type": type(self).__name__,
            "message": self.message,
            "category": self.category.value,
            "retryable": self.retryable,
        }
        if self.retry_after is not None:
            data["retry_after"] = self.retry_after
        if context := self.context.to_dict():
            data["context"] = context
        if self.cause is not None:
            data["cause"] = str(self.cause)
        return data

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r}, category={self.category.value})"


# --- transient -----------------------------------------------------------


class TransientError(TxSessionError):
    """May succeed if the operation is retried."""

    default_category = ErrorCategory.DATABASE
    default_retryable = True


class DatabaseConnectionError(TransientError):
    """Adapter could not open a connection or pool."""


# --- configuration -------------------------------------------------------


class ConfigError(TxSessionError):
    """Wrong setup; never retryable."""

    default_category = ErrorCategory.CONFIG


class UnsupportedDriverError(ConfigError):
    """Driver identifier is not one a session can be built for."""

    def __init__(self, driver: str, supported: list[str] | None = None):
        self.driver = driver
        self.supported = sorted(supported or [])
        message = f"Unsupported driver: {driver}"
        if self.supported:
            message += f" (supported: {', '.join(self.supported)})"
        super().__init__(message)


class ClientTypeError(ConfigError):
    """Client handle does not match the type the driver identifier implies."""

    def __init__(self, driver: str, expected: str, actual: Any):
        self.driver = driver
        self.expected = expected
        self.actual_type = type(actual).__name__
        super().__init__(f"Driver {driver!r} requires a {expected} client, got {self.actual_type}")


class InvalidConfigError(ConfigError):
    """A setting holds a value txsession cannot use."""

    def __init__(self, key: str, value: Any, message: str | None = None):
        self.key = key
        self.value = value
        super().__init__(message or f"Invalid value for {key}: {value!r}")


# --- database ------------------------------------------------------------


class DatabaseError(TxSessionError):
    """Statement or transaction failure reported by txsession."""

    default_category = ErrorCategory.DATABASE


class QueryError(DatabaseError):
    """SQL statement failed in the underlying driver."""


class TransactionClosedError(DatabaseError):
    """A context carried a transaction handle that was already committed or rolled back."""

    def __init__(self, tx_id: str):
        self.tx_id = tx_id
        super().__init__(f"Transaction {tx_id} has already been committed or rolled back")


def is_retryable(error: Exception) -> bool:
    """Whether retrying the failed operation could help."""
    if isinstance(error, TxSessionError):
        return error.retryable
    return isinstance(error, (ConnectionError, TimeoutError))


def categorize_error(error: Exception) -> ErrorCategory:
    if isinstance(error, TxSessionError):
        return error.category
    if isinstance(error, OSError):
        return ErrorCategory.DATABASE
    return ErrorCategory.UNKNOWN


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "TxSessionError",
    "TransientError",
    "DatabaseConnectionError",
    "ConfigError",
    "UnsupportedDriverError",
    "ClientTypeError",
    "InvalidConfigError",
    "DatabaseError",
    "QueryError",
    "TransactionClosedError",
    "is_retryable",
    "categorize_error",
]
