"""
Tests for the logging module.

Tests verify:
- Log context carries driver and tx_id while a transaction's work runs
- The context processor fills but never overrides entry keys
- configure_logging picks renderer and level from arguments or env
"""

import logging

import pytest
import structlog

from txsession.core.errors import InvalidConfigError
from txsession.logging import (
    LogContext,
    bind_context,
    clear_context,
    configure_logging,
    get_context,
    push_context,
)
from txsession.logging import config as log_config
from txsession.logging.context import add_context_processor


class TestLogContext:
    """Test LogContext dataclass."""

    def test_to_dict_excludes_none(self):
        ctx = LogContext(driver="sqlite", tx_id=None)
        assert ctx.to_dict() == {"driver": "sqlite"}

    def test_merge_creates_new_context(self):
        ctx1 = LogContext(driver="postgres")
        ctx2 = ctx1.merge(tx_id="ab12cd34", unknown="ignored")

        assert ctx1.tx_id is None
        assert ctx2.driver == "postgres"
        assert ctx2.tx_id == "ab12cd34"
        assert not hasattr(ctx2, "unknown")


class TestContextManagement:
    """Test bind/get/clear/push operations."""

    def test_bind_context_merges(self):
        bind_context(session="billing")
        ctx = bind_context(driver="mysql")

        assert ctx.session == "billing"
        assert get_context().driver == "mysql"

    def test_clear_context(self):
        bind_context(driver="mysql")
        clear_context()
        assert get_context().to_dict() == {}

    def test_push_context_restores(self):
        bind_context(session="billing")
        token = push_context(tx_id="ab12cd34")
        assert get_context().tx_id == "ab12cd34"

        token.restore()
        assert get_context().tx_id is None
        assert get_context().session == "billing"


class TestContextProcessor:
    def test_adds_context_fields(self):
        bind_context(driver="sqlite", tx_id="ab12cd34")
        event = add_context_processor(None, "info", {"event": "query"})
        assert event == {"event": "query", "driver": "sqlite", "tx_id": "ab12cd34"}

    def test_explicit_fields_win(self):
        bind_context(driver="sqlite")
        event = add_context_processor(None, "info", {"event": "query", "driver": "override"})
        assert event["driver"] == "override"


class TestTransactionLogContext:
    def test_tx_id_bound_during_work_only(self, raw_session):
        seen = {}

        def work(ctx):
            seen["context"] = get_context()
            seen["tx_id"] = ctx.transaction.tx_id

        raw_session.transaction(None, work)

        assert seen["context"].driver == "sqlite"
        assert seen["context"].tx_id == seen["tx_id"]
        assert get_context().tx_id is None

    def test_context_restored_after_failed_work(self, raw_session):
        def work(ctx):
            raise ValueError("boom")

        with pytest.raises(ValueError):
            raw_session.transaction(None, work)

        assert get_context().to_dict() == {}


class TestConfigureLogging:
    @pytest.fixture(autouse=True)
    def _isolate(self, monkeypatch):
        calls = {}
        monkeypatch.setattr(log_config, "_configured", False)
        monkeypatch.setattr(structlog, "configure", lambda **kw: calls.setdefault("structlog", kw))
        monkeypatch.setattr(logging, "basicConfig", lambda **kw: calls.setdefault("logging", kw))
        monkeypatch.delenv("TXSESSION_LOG_LEVEL", raising=False)
        monkeypatch.delenv("TXSESSION_LOG_FORMAT", raising=False)
        self.calls = calls

    def test_json_renderer(self):
        configure_logging(format="json")
        processors = self.calls["structlog"]["processors"]
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)
        assert add_context_processor in processors

    def test_console_renderer_by_default(self):
        configure_logging()
        assert isinstance(self.calls["structlog"]["processors"][-1], structlog.dev.ConsoleRenderer)
        assert self.calls["logging"]["level"] == logging.INFO

    def test_level_from_env(self, monkeypatch):
        monkeypatch.setenv("TXSESSION_LOG_LEVEL", "debug")
        configure_logging()
        assert self.calls["logging"]["level"] == logging.DEBUG

    def test_second_call_is_noop(self):
        configure_logging(level="ERROR")
        self.calls.clear()
        configure_logging(level="DEBUG")
        assert self.calls == {}
        assert log_config.is_configured() is True

    def test_force_reconfigures(self):
        configure_logging(level="ERROR")
        self.calls.clear()
        configure_logging(level="DEBUG", force=True)
        assert self.calls["logging"]["level"] == logging.DEBUG

    def test_unknown_level_from_env_rejected(self, monkeypatch):
        monkeypatch.setenv("TXSESSION_LOG_LEVEL", "verbose")
        with pytest.raises(InvalidConfigError) as exc_info:
            configure_logging()

        assert exc_info.value.key == "log_level"
        assert self.calls == {}
        assert log_config.is_configured() is False

    def test_unknown_format_rejected(self):
        with pytest.raises(InvalidConfigError, match="log_format"):
            configure_logging(format="xml")
