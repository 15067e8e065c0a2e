"""Tests for ``txsession.core.adapters.postgresql`` — PostgreSQL adapter."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from txsession.core.adapters.postgresql import PostgreSQLAdapter
from txsession.core.context import IsolationLevel, TransactionOptions
from txsession.core.errors import DatabaseConnectionError


def pooled_adapter() -> tuple[PostgreSQLAdapter, MagicMock, MagicMock]:
    adapter = PostgreSQLAdapter(host="localhost", database="txsession")
    pool = MagicMock()
    conn = MagicMock()
    pool.getconn.return_value = conn
    adapter._pool = pool
    return adapter, pool, conn


class TestPostgreSQLAdapterInit:
    def test_default_config(self):
        adapter = PostgreSQLAdapter()
        assert adapter.db_type.value == "postgresql"
        assert adapter.is_connected is False

    def test_repr_masks_password(self):
        adapter = PostgreSQLAdapter(database="app", username="admin", password="secret")
        assert "secret" not in repr(adapter)
        assert "admin:***@localhost:5432/app" in repr(adapter)


class TestPostgreSQLAdapterConnect:
    def test_connect_success(self):
        pytest.importorskip("psycopg2")
        with patch("psycopg2.pool.ThreadedConnectionPool") as mock_pool_cls:
            adapter = PostgreSQLAdapter(host="localhost", database="txsession", pool_size=3)
            adapter.connect()

        assert adapter.is_connected is True
        assert mock_pool_cls.call_args.kwargs["maxconn"] == 3

    def test_connect_failure(self):
        psycopg2 = pytest.importorskip("psycopg2")
        with patch("psycopg2.pool.ThreadedConnectionPool") as mock_pool_cls:
            mock_pool_cls.side_effect = psycopg2.OperationalError("Connection refused")
            adapter = PostgreSQLAdapter(host="bad-host", database="txsession")
            with pytest.raises(DatabaseConnectionError, match="Failed to connect"):
                adapter.connect()

    def test_disconnect_closes_pool(self):
        adapter, pool, _ = pooled_adapter()
        adapter.disconnect()
        pool.closeall.assert_called_once()
        assert adapter.is_connected is False


class TestPostgreSQLAdapterTransactions:
    def test_begin_default_options_leaves_session_alone(self):
        adapter, pool, conn = pooled_adapter()

        assert adapter.begin(TransactionOptions()) is conn
        conn.set_session.assert_not_called()
        pool.putconn.assert_not_called()

    def test_begin_applies_options(self):
        adapter, _, conn = pooled_adapter()
        adapter.begin(TransactionOptions(isolation_level=IsolationLevel.SERIALIZABLE, read_only=True))
        conn.set_session.assert_called_once_with(isolation_level="SERIALIZABLE", readonly=True)

    def test_begin_isolation_only(self):
        adapter, _, conn = pooled_adapter()
        adapter.begin(TransactionOptions(isolation_level=IsolationLevel.READ_COMMITTED))
        conn.set_session.assert_called_once_with(isolation_level="READ COMMITTED", readonly=None)

    def test_begin_failure_returns_connection(self):
        adapter, pool, conn = pooled_adapter()
        conn.set_session.side_effect = RuntimeError("bad level")

        with pytest.raises(RuntimeError):
            adapter.begin(TransactionOptions(read_only=True))

        pool.putconn.assert_called_once_with(conn)

    def test_finish_resets_and_releases(self):
        adapter, pool, conn = pooled_adapter()
        adapter.finish(conn)

        conn.rollback.assert_called_once()
        conn.set_session.assert_called_once_with(isolation_level="DEFAULT", readonly="DEFAULT")
        pool.putconn.assert_called_once_with(conn)

    def test_finish_releases_even_if_reset_fails(self):
        adapter, pool, conn = pooled_adapter()
        conn.rollback.side_effect = RuntimeError("connection lost")

        with pytest.raises(RuntimeError):
            adapter.finish(conn)

        pool.putconn.assert_called_once_with(conn)

    def test_transaction_commits_and_releases(self):
        adapter, pool, conn = pooled_adapter()
        with adapter.transaction() as c:
            assert c is conn
        conn.commit.assert_called_once()
        pool.putconn.assert_called_once_with(conn)
