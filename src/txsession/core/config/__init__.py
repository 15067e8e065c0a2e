"""Settings and settings-driven factories.

Quick start::

    from txsession.core.config import create_session, get_settings

    session = create_session(get_settings())

Architecture::

    settings.py       TxSessionSettings (pydantic-settings) + get_settings() cache
    factory.py        create_client / create_session

Guardrails:
    ❌ Parsing ``TXSESSION_*`` env vars ad-hoc
    ✅ ``get_settings().driver`` from the cached instance
"""

from .factory import create_client, create_session
from .settings import TxSessionSettings, clear_settings_cache, get_settings

__all__ = [
    "TxSessionSettings",
    "get_settings",
    "clear_settings_cache",
    "create_client",
    "create_session",
]
