"""
Shared pytest fixtures and configuration for txsession tests.

This module provides:
- Log-context cleanup for test isolation
- A seeded in-memory SQLite adapter and the raw session over it
- A seeded file-backed SQLAlchemy engine and the ORM session over it
"""

import sys
from collections.abc import Generator
from pathlib import Path

import pytest

# Ensure txsession package is importable without installation
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from txsession.core.adapters.sqlite import SQLiteAdapter
from txsession.core.orm.session import create_txsession_engine
from txsession.core.sessions import ORMSession, RDBMSSession, new_session
from txsession.logging import clear_context

SCHEMA = "CREATE TABLE accounts (id INTEGER PRIMARY KEY, owner TEXT NOT NULL, balance INTEGER NOT NULL)"
SEED = [(1, "ada", 100), (2, "grace", 50)]


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Mark tests without explicit markers as unit tests."""
    for item in items:
        markers = {mark.name for mark in item.iter_markers()}
        if not markers.intersection({"unit", "integration"}):
            item.add_marker(pytest.mark.unit)


@pytest.fixture(autouse=True)
def clean_log_context() -> Generator[None, None, None]:
    """Reset the logging context around every test."""
    clear_context()
    yield
    clear_context()


@pytest.fixture
def sqlite_adapter() -> Generator[SQLiteAdapter, None, None]:
    """In-memory SQLite adapter with a seeded ``accounts`` table."""
    adapter = SQLiteAdapter(path=":memory:")
    conn = adapter.get_connection()
    conn.execute(SCHEMA)
    conn.executemany("INSERT INTO accounts (id, owner, balance) VALUES (?, ?, ?)", SEED)
    conn.commit()
    yield adapter
    adapter.disconnect()


@pytest.fixture
def raw_session(sqlite_adapter: SQLiteAdapter) -> RDBMSSession:
    return new_session("sqlite", sqlite_adapter)


@pytest.fixture
def orm_engine(tmp_path: Path):
    """File-backed SQLite engine with a seeded ``accounts`` table."""
    engine = create_txsession_engine(f"sqlite:///{tmp_path / 'accounts.db'}")
    with engine.begin() as conn:
        conn.exec_driver_sql(SCHEMA)
        for row in SEED:
            conn.exec_driver_sql("INSERT INTO accounts (id, owner, balance) VALUES (?, ?, ?)", row)
    yield engine
    engine.dispose()


@pytest.fixture
def orm_session(orm_engine) -> ORMSession:
    return new_session("sqlalchemy", orm_engine)
