"""
Tests for structured logging configuration and JSON formatter.
"""
import json
import logging
import sys
from unittest.mock import patch

import pytest

from app.core.logging_config import (
    JSONFormatter,
    request_id_context,
    setup_logging,
)


def _record(level=logging.INFO, msg="Test message", pathname="test.py", lineno=10):
    return logging.LogRecord(
        name="test_logger",
        level=level,
        pathname=pathname,
        lineno=lineno,
        msg=msg,
        args=(),
        exc_info=None,
    )


class TestJSONFormatter:
    """Tests for the JSONFormatter class."""

    def test_basic_log_entry(self):
        """Test that basic log entry produces valid JSON with required fields."""
        log_entry = json.loads(JSONFormatter().format(_record()))

        assert "timestamp" in log_entry
        assert log_entry["level"] == "INFO"
        assert log_entry["logger"] == "test_logger"
        assert log_entry["message"] == "Test message"

    def test_request_id_from_context(self):
        """Test that request_id is included when set in context."""
        token = request_id_context.set("test-request-123")
        try:
            log_entry = json.loads(JSONFormatter().format(_record()))

            assert log_entry["request_id"] == "test-request-123"
        finally:
            request_id_context.reset(token)

    def test_no_request_id_when_not_set(self):
        """Test that request_id is omitted when not set."""
        token = request_id_context.set(None)
        try:
            log_entry = json.loads(JSONFormatter().format(_record()))

            assert "request_id" not in log_entry
        finally:
            request_id_context.reset(token)

    def test_structured_fields_from_extra(self):
        """Test that request fields added by the middleware are included."""
        record = _record(msg="Request completed")
        record.method = "POST"
        record.path = "/v1/rci/calculate"
        record.status_code = 200
        record.duration_ms = 3.25
        record.client_host = "127.0.0.1"

        log_entry = json.loads(JSONFormatter().format(record))

        assert log_entry["method"] == "POST"
        assert log_entry["path"] == "/v1/rci/calculate"
        assert log_entry["status_code"] == 200
        assert log_entry["duration_ms"] == pytest.approx(3.25)
        assert log_entry["client_host"] == "127.0.0.1"

    def test_rci_fields_from_extra(self):
        """Test that calculation fields logged by the RCI endpoint are included."""
        record = _record(msg="RCI inputs rejected: non_positive_sd")
        record.error_code = "non_positive_sd"
        record.mode = "z_score"

        log_entry = json.loads(JSONFormatter().format(record))

        assert log_entry["error_code"] == "non_positive_sd"
        assert log_entry["mode"] == "z_score"

    def test_unknown_extra_fields_ignored(self):
        record = _record()
        record.pre_score = 25

        log_entry = json.loads(JSONFormatter().format(record))

        assert "pre_score" not in log_entry

    def test_source_location_for_errors(self):
        """Test that source location is included for error-level logs."""
        record = _record(
            level=logging.ERROR, pathname="/app/api/endpoint.py", lineno=42
        )

        log_entry = json.loads(JSONFormatter().format(record))

        assert log_entry["source"] == "/app/api/endpoint.py:42"

    def test_no_source_location_for_info(self):
        """Test that source location is not included for info-level logs."""
        record = _record(pathname="/app/api/endpoint.py", lineno=42)

        log_entry = json.loads(JSONFormatter().format(record))

        assert "source" not in log_entry

    def test_exception_info_included(self):
        """Test that exception info is included when present."""
        try:
            raise ValueError("Test error")
        except ValueError:
            record = _record(level=logging.ERROR, msg="An error occurred")
            record.exc_info = sys.exc_info()

            log_entry = json.loads(JSONFormatter().format(record))

            assert "ValueError" in log_entry["exception"]
            assert "Test error" in log_entry["exception"]

    def test_timestamp_is_iso_format(self):
        """Test that timestamp is in ISO format with timezone."""
        log_entry = json.loads(JSONFormatter().format(_record()))

        assert "T" in log_entry["timestamp"]
        assert log_entry["timestamp"].endswith("+00:00")


class TestSetupLogging:
    """Tests for the setup_logging function."""

    @patch("app.core.logging_config.settings")
    def test_production_uses_json_formatter(self, mock_settings):
        """Test that production environment uses JSON formatter."""
        mock_settings.ENV = "production"
        mock_settings.DEBUG = False
        mock_settings.LOG_LEVEL = "INFO"

        with patch("logging.config.dictConfig") as mock_dictconfig:
            setup_logging()

            call_args = mock_dictconfig.call_args[0][0]
            assert call_args["handlers"]["console"]["formatter"] == "json"

    @patch("app.core.logging_config.settings")
    def test_development_uses_default_formatter(self, mock_settings):
        """Test that development environment uses human-readable formatter."""
        mock_settings.ENV = "development"
        mock_settings.DEBUG = True
        mock_settings.LOG_LEVEL = "DEBUG"

        with patch("logging.config.dictConfig") as mock_dictconfig:
            setup_logging()

            call_args = mock_dictconfig.call_args[0][0]
            assert call_args["handlers"]["console"]["formatter"] == "default"
            assert call_args["root"]["level"] == logging.DEBUG

    @patch("app.core.logging_config.settings")
    def test_app_logger_does_not_propagate(self, mock_settings):
        mock_settings.ENV = "development"
        mock_settings.DEBUG = True
        mock_settings.LOG_LEVEL = "WARNING"

        with patch("logging.config.dictConfig") as mock_dictconfig:
            setup_logging()

            app_logger = mock_dictconfig.call_args[0][0]["loggers"]["app"]
            assert app_logger["propagate"] is False
            assert app_logger["level"] == logging.WARNING


class TestRequestIdContext:
    """Tests for the request_id context variable."""

    def test_set_and_get(self):
        token = request_id_context.set("my-request-id")
        try:
            assert request_id_context.get() == "my-request-id"
        finally:
            request_id_context.reset(token)

    def test_context_isolation(self):
        original = request_id_context.get()

        token = request_id_context.set("temporary-id")
        assert request_id_context.get() == "temporary-id"

        request_id_context.reset(token)
        assert request_id_context.get() == original
