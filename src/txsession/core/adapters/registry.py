"""Driver identifier → adapter class.

The session factory checks a raw client against the class registered for
its identifier, and ``create_client`` builds adapters through the same
mapping, so an adapter added with :meth:`AdapterRegistry.register` is
accepted everywhere a built-in one is.

Tags:
    txsession, database, registry, factory

Doc-Types:
    api-reference
"""

from __future__ import annotations

from typing import Any

from txsession.core.errors import ConfigError

from .base import DatabaseAdapter
from .mysql import MySQLAdapter
from .postgresql import PostgreSQLAdapter
from .sqlite import SQLiteAdapter
from .types import DatabaseType

_BUILTIN_ADAPTERS: dict[str, type[DatabaseAdapter]] = {
    "sqlite": SQLiteAdapter,
    "postgresql": PostgreSQLAdapter,
    "postgres": PostgreSQLAdapter,
    "mysql": MySQLAdapter,
}


class AdapterRegistry:
    """Case-insensitive mapping of driver identifiers to adapter classes."""

    def __init__(self) -> None:
        self._classes: dict[str, type[DatabaseAdapter]] = dict(_BUILTIN_ADAPTERS)

    def register(self, name: str, adapter_class: type[DatabaseAdapter]) -> None:
        self._classes[name.lower()] = adapter_class

    def unregister(self, name: str) -> None:
        """Forget *name*; unknown names are ignored."""
        self._classes.pop(name.lower(), None)

    def adapter_class(self, name: str) -> type[DatabaseAdapter] | None:
        return self._classes.get(name.lower())

    def create(self, name: str, **kwargs: Any) -> DatabaseAdapter:
        """Instantiate the adapter registered under *name* with *kwargs*."""
        adapter_class = self.adapter_class(name)
        if adapter_class is None:
            raise ConfigError(f"Unknown database adapter: {name.lower()}")
        return adapter_class(**kwargs)

    def list_adapters(self) -> list[str]:
        return sorted(self._classes)


adapter_registry = AdapterRegistry()


def get_adapter(db_type: DatabaseType | str, **kwargs: Any) -> DatabaseAdapter:
    """
    Build an adapter from the global registry.

    Usage:
        adapter = get_adapter(DatabaseType.SQLITE, path="data.db")
        adapter = get_adapter("postgres", host="localhost", database="app")
    """
    name = db_type.value if isinstance(db_type, DatabaseType) else db_type
    return adapter_registry.create(name, **kwargs)


__all__ = [
    "AdapterRegistry",
    "adapter_registry",
    "get_adapter",
]
