"""
Per-task log fields carried in a ``ContextVar``.

``Session.transaction`` pushes the driver and transaction id while the
work runs, so every entry logged from inside the work carries them without
a logger being passed around.  Transaction routing never reads this state;
it only feeds log output.
"""

from contextvars import ContextVar
from dataclasses import dataclass, fields, replace
from typing import Any

import structlog


@dataclass(frozen=True)
class LogContext:
    """
    Fields merged into every log entry.

    driver: Driver identifier of the active session (e.g. "postgres")
    tx_id: Id of the in-flight transaction
    session: Free-form label set by the caller
    """

    driver: str | None = None
    tx_id: str | None = None
    session: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name) is not None}

    def merge(self, **kwargs) -> "LogContext":
        """Copy with the given non-None values applied; unknown keys are dropped."""
        names = {f.name for f in fields(self)}
        return replace(self, **{k: v for k, v in kwargs.items() if v is not None and k in names})


_EMPTY = LogContext()
_log_context: ContextVar[LogContext] = ContextVar("txsession_log_context", default=_EMPTY)


def get_context() -> LogContext:
    return _log_context.get()


def bind_context(**kwargs) -> LogContext:
    """Merge values into the current context for the rest of this task."""
    updated = get_context().merge(**kwargs)
    _log_context.set(updated)
    return updated


def clear_context() -> None:
    _log_context.set(_EMPTY)


class _ContextToken:
    """Undo handle returned by :func:`push_context`."""

    def __init__(self, token):
        self._token = token

    def restore(self):
        _log_context.reset(self._token)


def push_context(**kwargs) -> _ContextToken:
    """
    Merge values into the context until the returned token is restored.

    Usage:
        token = push_context(tx_id="ab12cd34")
        try:
            run_statements()
        finally:
            token.restore()
    """
    return _ContextToken(_log_context.set(get_context().merge(**kwargs)))


def add_context_processor(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """structlog processor: fill entry keys from the log context, never overriding."""
    for key, value in get_context().to_dict().items():
        event_dict.setdefault(key, value)
    return event_dict


def get_logger(name: str | None = None) -> Any:
    """Module logger, typically ``get_logger(__name__)``."""
    return structlog.get_logger(name)
