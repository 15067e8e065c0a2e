"""Tests for ORMSession over a SQLAlchemy engine and sessionmaker."""

from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError
from structlog.testing import capture_logs

from txsession.core.context import NO_TRANSACTION, IsolationLevel, TransactionOptions
from txsession.core.errors import QueryError, TransactionClosedError
from txsession.core.orm.session import ManagedSession, managed_session_factory
from txsession.core.sessions import ORMSession, new_session
from txsession.core.sessions.orm import ORMTransaction
from txsession.core.sessions.rdbms import RawTransaction


def balance(session, account_id):
    return session.query_row(None, "SELECT balance FROM accounts WHERE id = ?", account_id).balance


class TestCommitAndRollback:
    def test_committed_update_is_visible(self, orm_session):
        orm_session.transaction(
            NO_TRANSACTION,
            lambda ctx: orm_session.exec_query(ctx, "UPDATE accounts SET balance = ? WHERE id = ?", 0, 1),
        )
        assert balance(orm_session, 1) == 0

    def test_failed_work_leaves_no_trace(self, orm_session):
        def work(ctx):
            orm_session.exec_query(ctx, "UPDATE accounts SET balance = ? WHERE id = ?", 0, 1)
            raise ValueError("insufficient funds")

        with pytest.raises(ValueError, match="insufficient funds"):
            orm_session.transaction(NO_TRANSACTION, work)

        assert balance(orm_session, 1) == 100

    def test_reads_inside_transaction_see_own_writes(self, orm_session):
        def work(ctx):
            orm_session.exec_query(ctx, "UPDATE accounts SET balance = balance + 5 WHERE id = 2")
            return orm_session.query_row(ctx, "SELECT balance FROM accounts WHERE id = 2").balance

        assert orm_session.transaction(None, work) == 55

    def test_handle_session_closed_after_transaction(self, orm_session):
        handle = orm_session.transaction(None, lambda ctx: ctx.transaction)
        assert isinstance(handle, ORMTransaction)
        assert isinstance(handle.session, ManagedSession)
        assert handle.finished is True
        assert not handle.session.in_transaction()

    def test_failing_statement_rolls_back_earlier_writes(self, orm_session):
        def work(ctx):
            orm_session.exec_query(ctx, "UPDATE accounts SET balance = 0 WHERE id = 1")
            orm_session.exec_query(ctx, "INSERT INTO accounts (id, owner, balance) VALUES (?, ?, ?)", 1, "dup", 0)

        with pytest.raises(QueryError) as exc_info:
            orm_session.transaction(None, work)

        assert isinstance(exc_info.value.cause, IntegrityError)
        assert balance(orm_session, 1) == 100


class TestQueries:
    def test_positional_params(self, orm_session):
        row = orm_session.query_row(None, "SELECT owner FROM accounts WHERE id = ? AND balance > ?", 1, 10)
        assert row.owner == "ada"

    def test_mapping_params(self, orm_session):
        row = orm_session.query_row(None, "SELECT owner FROM accounts WHERE id = :id", {"id": 2})
        assert row.owner == "grace"

    def test_query_row_without_match_returns_none(self, orm_session):
        assert orm_session.query_row(None, "SELECT * FROM accounts WHERE id = ?", 99) is None

    def test_query_rows_returns_list(self, orm_session):
        rows = orm_session.query_rows(None, "SELECT id, owner FROM accounts ORDER BY id")
        assert isinstance(rows, list)
        assert [tuple(r) for r in rows] == [(1, "ada"), (2, "grace")]

    def test_exec_query_result(self, orm_session):
        result = orm_session.exec_query(None, "INSERT INTO accounts (owner, balance) VALUES (?, ?)", "linus", 5)
        assert result.rows_affected == 1
        assert result.last_insert_id == 3

    def test_plain_write_commits_immediately(self, orm_session):
        orm_session.exec_query(None, "UPDATE accounts SET balance = 7 WHERE id = 2")
        assert balance(orm_session, 2) == 7

    def test_driver_error_wrapped(self, orm_session):
        with pytest.raises(QueryError) as exc_info:
            orm_session.query_rows(None, "SELECT * FROM missing_table")

        error = exc_info.value
        assert isinstance(error.cause, OperationalError)
        assert error.context.driver == "sqlalchemy"
        assert error.context.query == "SELECT * FROM missing_table"


class TestContextRouting:
    def test_leaked_context_rejected(self, orm_session):
        leaked = orm_session.transaction(None, lambda ctx: ctx)
        with pytest.raises(TransactionClosedError):
            orm_session.query_rows(leaked, "SELECT * FROM accounts")

    def test_raw_handle_falls_back_to_client(self, orm_session):
        ctx = NO_TRANSACTION.with_transaction(RawTransaction(driver="sqlite"))

        with capture_logs() as logs:
            row = orm_session.query_row(ctx, "SELECT owner FROM accounts WHERE id = ?", 1)

        assert row.owner == "ada"
        assert any(entry["event"] == "query.foreign_handle" for entry in logs)


class TestClients:
    def test_engine_wrapped_in_managed_factory(self, orm_engine):
        session = ORMSession("sqlalchemy", orm_engine)
        handle = session.transaction(None, lambda ctx: ctx.transaction)
        assert handle.session.bind is orm_engine

    def test_sessionmaker_used_as_is(self, orm_engine):
        factory = managed_session_factory(orm_engine)
        session = new_session("sqlalchemy", factory)

        session.transaction(None, lambda ctx: session.exec_query(ctx, "DELETE FROM accounts WHERE id = 2"))

        assert session.query_rows(None, "SELECT id FROM accounts") == [(1,)]


class TestTransactionOptions:
    def test_serializable_on_sqlite(self, orm_engine):
        session = new_session(
            "sqlalchemy",
            orm_engine,
            TransactionOptions(isolation_level=IsolationLevel.SERIALIZABLE),
        )
        session.transaction(None, lambda ctx: session.exec_query(ctx, "UPDATE accounts SET balance = 1"))
        assert balance(session, 2) == 1

    def test_read_only_not_forwarded_on_sqlite(self, orm_engine):
        session = new_session("sqlalchemy", orm_engine, TransactionOptions(read_only=True))
        sa_session = MagicMock()
        sa_session.get_bind.return_value.dialect.name = "sqlite"

        assert session._execution_options(sa_session) == {}

    def test_read_only_forwarded_on_postgresql(self, orm_engine):
        session = new_session(
            "sqlalchemy",
            orm_engine,
            TransactionOptions(isolation_level=IsolationLevel.REPEATABLE_READ, read_only=True),
        )
        sa_session = MagicMock()
        sa_session.get_bind.return_value.dialect.name = "postgresql"

        assert session._execution_options(sa_session) == {
            "isolation_level": "REPEATABLE READ",
            "postgresql_readonly": True,
        }

    def test_begin_failure_closes_session(self):
        sa_session = MagicMock()
        sa_session.connection.side_effect = OperationalError("connect", {}, Exception("refused"))
        factory = MagicMock(return_value=sa_session)
        session = ORMSession("sqlalchemy", factory)
        invoked = []

        with pytest.raises(OperationalError):
            session.transaction(None, invoked.append)

        assert invoked == []
        sa_session.close.assert_called_once()
