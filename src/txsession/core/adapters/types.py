"""Connection parameters shared by the raw-driver adapters."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class DatabaseType(str, Enum):
    """Backends a raw session can drive."""

    SQLITE = "sqlite"
    POSTGRESQL = "postgresql"
    MYSQL = "mysql"


@dataclass
class DatabaseConfig:
    """
    Where an adapter connects and how many connections it may hold.

    SQLite reads only ``path`` and ``readonly``; the server backends read
    the network fields and ``pool_size``.
    """

    db_type: DatabaseType = DatabaseType.SQLITE

    path: str | None = None
    readonly: bool = False

    host: str = "localhost"
    port: int | None = None
    database: str = ""
    username: str | None = None
    password: str | None = field(default=None, repr=False)

    pool_size: int = 5
    connect_timeout: int = 10

    # Passed through to the driver's connect call
    options: dict[str, Any] = field(default_factory=dict)

    def safe_url(self) -> str:
        """URL form for reprs and log entries; never contains the password."""
        if self.db_type is DatabaseType.SQLITE:
            return self.path or ":memory:"
        credentials = f"{self.username}:***@" if self.username else ""
        return f"{self.db_type.value}://{credentials}{self.host}:{self.port}/{self.database}"


__all__ = [
    "DatabaseType",
    "DatabaseConfig",
]
