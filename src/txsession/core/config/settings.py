"""
Centralized settings for txsession.

:class:`TxSessionSettings` is the single validated source for the driver
identifier, the database URL and the transaction options a session is
built with.  Values come from ``TXSESSION_*`` environment variables or a
``.env`` file.

Tags:
    txsession, configuration, settings, pydantic, validation

Doc-Types:
    api-reference
"""

from __future__ import annotations

from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from txsession.core.context import IsolationLevel, TransactionOptions
from txsession.core.sessions.factory import supported_drivers


class TxSessionSettings(BaseSettings):
    """txsession configuration.

    All fields can be set via ``TXSESSION_*`` environment variables (e.g.
    ``TXSESSION_DRIVER=postgres``) or through a ``.env`` file.
    """

    model_config = SettingsConfigDict(
        env_prefix="TXSESSION_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Session ──────────────────────────────────────────────────
    driver: str = Field(default="sqlite", description="Driver identifier passed to new_session")
    database_url: str = Field(default="sqlite:///:memory:")

    # ── Transaction options ──────────────────────────────────────
    isolation_level: IsolationLevel | None = Field(default=None)
    read_only: bool = Field(default=False)

    # ── Pool ─────────────────────────────────────────────────────
    pool_size: int = Field(default=5, ge=1)
    max_overflow: int = Field(default=10, ge=0)
    echo: bool = Field(default=False)

    # ── Logging ──────────────────────────────────────────────────
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="console")

    @field_validator("driver")
    @classmethod
    def _known_driver(cls, value: str) -> str:
        value = value.lower()
        supported = supported_drivers()
        if value not in supported:
            raise ValueError(f"unsupported driver {value!r}; expected one of {', '.join(supported)}")
        return value

    @field_validator("isolation_level", mode="before")
    @classmethod
    def _normalize_isolation_level(cls, value: Any) -> Any:
        # Accept "read_committed" / "read committed" / "READ COMMITTED"
        if isinstance(value, str):
            value = value.strip()
            if not value:
                return None
            return value.upper().replace("_", " ")
        return value

    @field_validator("log_format")
    @classmethod
    def _known_format(cls, value: str) -> str:
        value = value.lower()
        if value not in ("json", "console"):
            raise ValueError("log_format must be 'json' or 'console'")
        return value

    def transaction_options(self) -> TransactionOptions:
        """Transaction options every session built from these settings uses."""
        return TransactionOptions(isolation_level=self.isolation_level, read_only=self.read_only)


_settings_cache: TxSessionSettings | None = None


def get_settings(*, _force_reload: bool = False) -> TxSessionSettings:
    """Load, validate, and cache a :class:`TxSessionSettings` instance."""
    global _settings_cache
    if _settings_cache is None or _force_reload:
        _settings_cache = TxSessionSettings()
    return _settings_cache


def clear_settings_cache() -> None:
    """Drop the cached settings so the next ``get_settings()`` re-reads the environment."""
    global _settings_cache
    _settings_cache = None


__all__ = [
    "TxSessionSettings",
    "get_settings",
    "clear_settings_cache",
]
