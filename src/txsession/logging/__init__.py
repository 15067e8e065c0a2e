"""
txsession logging - structured, transaction-aware logging.

This module provides:
- Structured logging with structlog
- Driver / transaction id propagation into log entries via contextvars
- Environment-based configuration

Usage:
    from txsession.logging import configure_logging, get_logger

    configure_logging()
    log = get_logger(__name__)
    log.info("session.created", driver="postgres")
"""

from txsession.logging.config import configure_logging, is_configured
from txsession.logging.context import (
    LogContext,
    bind_context,
    clear_context,
    get_context,
    get_logger,
    push_context,
)

__all__ = [
    "configure_logging",
    "is_configured",
    "get_logger",
    "get_context",
    "bind_context",
    "clear_context",
    "push_context",
    "LogContext",
]
