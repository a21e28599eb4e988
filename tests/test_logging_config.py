"""Tests for logging context handling."""

import json
import logging

import pytest

from recipekit.logging_config import (
    LoggingContext,
    StructuredJsonFormatter,
    clear_context,
    request_id_ctx,
    set_context,
    user_id_ctx,
)


@pytest.fixture(autouse=True)
def clean_context():
    """Start and end every test without logging context."""
    clear_context()
    yield
    clear_context()


def _record(message: str = "hello") -> logging.LogRecord:
    return logging.LogRecord("recipekit.test", logging.INFO, __file__, 1, message, None, None)


class TestLoggingContext:
    """Tests for context variable helpers."""

    def test_set_and_clear(self):
        """Test clear_context removes request and user IDs."""
        set_context(request_id="req-1", user_id="user-1")
        assert request_id_ctx.get() == "req-1"
        assert user_id_ctx.get() == "user-1"

        clear_context()

        assert request_id_ctx.get() is None
        assert user_id_ctx.get() is None

    def test_context_manager_restores(self):
        """Test LoggingContext restores the previous values on exit."""
        set_context(request_id="outer")

        with LoggingContext(request_id="inner", user_id="user-1"):
            assert request_id_ctx.get() == "inner"
            assert user_id_ctx.get() == "user-1"

        assert request_id_ctx.get() == "outer"
        assert user_id_ctx.get() is None


class TestStructuredJsonFormatter:
    """Tests for JSON log lines."""

    def test_includes_context(self):
        """Test request and user IDs are added to the log line."""
        with LoggingContext(request_id="req-9", user_id="user-9"):
            data = json.loads(StructuredJsonFormatter().format(_record()))

        assert data["message"] == "hello"
        assert data["request_id"] == "req-9"
        assert data["user_id"] == "user-9"

    def test_omits_missing_context(self):
        """Test no context keys appear outside a request."""
        data = json.loads(StructuredJsonFormatter().format(_record()))

        assert "request_id" not in data
        assert "user_id" not in data
