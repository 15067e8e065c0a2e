"""
Function-level transaction scoping.

``@transactional(session)`` wraps a function that accepts a ``ctx``
keyword argument.  If the caller passes a context already carrying one of
*session*'s transactions, the function joins it; otherwise (no context, no
transaction, or another backend's handle) the call runs inside a new
``session.transaction`` and receives the transactional context.

Example
-------
>>> @transactional(session)
... def rename_user(user_id, name, *, ctx):
...     session.exec_query(ctx, "UPDATE users SET name=? WHERE id=?", name, user_id)
...
>>> rename_user(1, "ada")                  # own transaction
>>> session.transaction(None, lambda c: rename_user(1, "ada", ctx=c))  # joins
"""

from __future__ import annotations

from collections.abc import Callable
from functools import wraps
from typing import Any, TypeVar

from txsession.core.context import TransactionHandle, TxContext
from txsession.core.protocols import TransactionalSession

T = TypeVar("T")


def transactional(session: TransactionalSession) -> Callable[[Callable[..., T]], Callable[..., T]]:
    handle_type = getattr(session, "handle_type", TransactionHandle)

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        def wrap_func(*args: Any, ctx: TxContext | None = None, **kwargs: Any) -> T:
            if ctx is not None and isinstance(ctx.transaction, handle_type):
                return func(*args, ctx=ctx, **kwargs)
            return session.transaction(ctx, lambda tx_ctx: func(*args, ctx=tx_ctx, **kwargs))

        return wrap_func

    return decorator


__all__ = [
    "transactional",
]
