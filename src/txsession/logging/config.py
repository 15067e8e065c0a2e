"""
structlog setup for applications using txsession.

Library code only asks for loggers; the application calls
``configure_logging()`` once at startup.  Arguments win over the
environment:

- TXSESSION_LOG_LEVEL: DEBUG | INFO | WARNING | ERROR (default: INFO)
- TXSESSION_LOG_FORMAT: json | console (default: console)

Usage:
    from txsession.logging import configure_logging

    configure_logging(level="DEBUG", format="json")
"""

import logging
import os
import sys
from typing import Literal

import structlog
from structlog.types import Processor

from txsession.core.errors import InvalidConfigError
from txsession.logging.context import add_context_processor

_configured = False

_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _renderer(log_format: str) -> Processor:
    if log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=True, exception_formatter=structlog.dev.plain_traceback)


def configure_logging(
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] | None = None,
    format: Literal["json", "console"] | None = None,
    force: bool = False,
) -> None:
    """
    Route structlog through stdlib logging with txsession's processors.

    Only the first call takes effect unless ``force=True``.

    Args:
        level: Minimum level; falls back to TXSESSION_LOG_LEVEL
        format: ``json`` or ``console``; falls back to TXSESSION_LOG_FORMAT
        force: Apply again even if logging is already configured

    Raises:
        InvalidConfigError: Unknown level or format
    """
    global _configured
    if _configured and not force:
        return

    log_level = (level or os.environ.get("TXSESSION_LOG_LEVEL") or "INFO").upper()
    log_format = (format or os.environ.get("TXSESSION_LOG_FORMAT") or "console").lower()
    if log_level not in _LEVELS:
        raise InvalidConfigError("log_level", log_level)
    if log_format not in ("json", "console"):
        raise InvalidConfigError("log_format", log_format)
    numeric_level = getattr(logging, log_level)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            # driver / tx_id of the transaction being run
            add_context_processor,
            structlog.processors.format_exc_info,
            structlog.processors.StackInfoRenderer(),
            _renderer(log_format),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=numeric_level, force=True)
    logging.getLogger("txsession").setLevel(numeric_level)

    _configured = True


def is_configured() -> bool:
    return _configured
