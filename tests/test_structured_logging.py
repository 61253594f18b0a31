"""
TEST_STRUCTURED_LOGGING.PY - Tests for Structured Logging
==========================================================

Tests verify:
1. Request ID generation and context
2. JSON log format structure
3. Secret redaction in logs
4. Middleware request correlation

Run with: python -m pytest tests/test_structured_logging.py -v
"""

import json
import logging

import pytest

from core.structured_logging import (
    get_request_id,
    set_request_id,
    clear_request_id,
    generate_request_id,
    JSONFormatter,
    TextFormatter,
    configure_structured_logging,
)


def make_record(msg: str = "Test message", lineno: int = 42) -> logging.LogRecord:
    return logging.LogRecord(
        name="test_logger",
        level=logging.INFO,
        pathname="test.py",
        lineno=lineno,
        msg=msg,
        args=(),
        exc_info=None,
    )


class TestRequestIdContext:
    """Tests for request ID context management."""

    def test_generate_request_id_format(self):
        """Request IDs should have req- prefix and 12 hex chars."""
        request_id = generate_request_id()
        assert request_id.startswith("req-")
        assert len(request_id) == 16

    def test_set_and_get_request_id(self):
        set_request_id("req-test123456")
        assert get_request_id() == "req-test123456"
        clear_request_id()

    def test_clear_request_id(self):
        set_request_id("req-test123456")
        clear_request_id()
        assert get_request_id() is None


class TestJSONFormatter:
    """Tests for JSON log formatter."""

    def test_json_format_structure(self):
        parsed = json.loads(JSONFormatter().format(make_record()))

        assert "timestamp" in parsed
        assert parsed["level"] == "INFO"
        assert parsed["logger"] == "test_logger"
        assert parsed["message"] == "Test message"
        assert parsed["line"] == 42
        assert "engine_version" not in parsed

    def test_engine_version_stamped(self):
        parsed = json.loads(JSONFormatter(engine_version="3.2").format(make_record()))
        assert parsed["engine_version"] == "3.2"

    def test_json_includes_request_id_when_set(self):
        set_request_id("req-abc123def456")
        parsed = json.loads(JSONFormatter().format(make_record()))
        assert parsed["request_id"] == "req-abc123def456"
        clear_request_id()

    def test_json_excludes_request_id_when_not_set(self):
        clear_request_id()
        parsed = json.loads(JSONFormatter().format(make_record()))
        assert "request_id" not in parsed

    @pytest.mark.parametrize("key", ["api_key", "odds_api_token", "client_secret", "Authorization"])
    def test_json_redacts_sensitive_keys(self, key):
        record = make_record()
        setattr(record, key, "secret_value_123")
        parsed = json.loads(JSONFormatter().format(record))
        assert parsed[key] == "[REDACTED]"

    def test_json_includes_extra_fields(self):
        record = make_record("Graded game")
        record.game_id = "NYY@BOS-20260704"
        record.grade = "B+"
        record.composite_score = 71.2

        parsed = json.loads(JSONFormatter().format(record))

        assert parsed["game_id"] == "NYY@BOS-20260704"
        assert parsed["grade"] == "B+"
        assert parsed["composite_score"] == 71.2


class TestTextFormatter:
    """Tests for text log formatter."""

    def test_text_format_structure(self):
        set_request_id("req-test123456")
        record = make_record()
        record.funcName = "test_func"

        output = TextFormatter().format(record)

        assert "[INFO]" in output
        assert "[req-test123456]" in output
        assert "test_logger:test_func:42" in output
        assert "Test message" in output
        clear_request_id()

    def test_text_format_without_request_id(self):
        clear_request_id()
        assert "[-]" in TextFormatter().format(make_record())


class TestConfigureLogging:
    """Tests for logging configuration."""

    def test_configure_json_format(self):
        configure_structured_logging(level="DEBUG", format_type="json", engine_version="3.2")
        handler = logging.getLogger().handlers[0]
        assert isinstance(handler.formatter, JSONFormatter)
        assert handler.formatter.engine_version == "3.2"

    def test_configure_text_format(self):
        configure_structured_logging(level="DEBUG", format_type="text")
        assert isinstance(logging.getLogger().handlers[0].formatter, TextFormatter)

    def test_configure_is_idempotent(self):
        """Calling configure multiple times should not add duplicate handlers."""
        configure_structured_logging(level="INFO", format_type="json")
        configure_structured_logging(level="INFO", format_type="json")
        configure_structured_logging(level="DEBUG", format_type="text")

        root_logger = logging.getLogger()
        assert len(root_logger.handlers) == 1
        assert root_logger.level == logging.DEBUG
