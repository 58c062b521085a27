"""
Tests for structured logging configuration.
"""

import logging

import structlog
from structlog.contextvars import get_contextvars

from apps.core.logging import (
    SERVICE_NAME,
    _add_service_name,
    _rename_request_id,
    bind_contextvars,
    clear_contextvars,
    configure_logging,
    get_logger,
)


class TestConfigureLogging:
    def test_configure_logging_json_format(self):
        configure_logging(json_format=True, log_level="INFO")

        assert structlog.get_config()["wrapper_class"] is structlog.stdlib.BoundLogger
        assert logging.getLogger().level == logging.INFO

    def test_configure_logging_console_format(self):
        configure_logging(json_format=False, log_level="DEBUG")

        assert logging.getLogger().level == logging.DEBUG

    def test_stripe_sdk_debug_is_suppressed(self):
        configure_logging(json_format=True, log_level="DEBUG")

        assert logging.getLogger("stripe").level == logging.INFO


class TestProcessors:
    def test_service_name_added(self):
        event = _add_service_name(None, "info", {"event": "x"})

        assert event["service"] == SERVICE_NAME

    def test_request_id_renamed_to_trace_id(self):
        event = _rename_request_id(None, "info", {"event": "x", "request_id": "abc123"})

        assert event["trace_id"] == "abc123"
        assert "request_id" not in event

    def test_without_request_id_untouched(self):
        event = _rename_request_id(None, "info", {"event": "x"})

        assert event == {"event": "x"}


class TestContextVars:
    def setup_method(self):
        clear_contextvars()

    def teardown_method(self):
        clear_contextvars()

    def test_bind_contextvars_with_dotted_keys(self):
        bind_contextvars(**{"usr.id": "42", "http.method": "POST"})

        ctx = get_contextvars()
        assert ctx["usr.id"] == "42"
        assert ctx["http.method"] == "POST"

    def test_clear_contextvars_removes_context(self):
        bind_contextvars(request_id="abc123")
        clear_contextvars()

        assert get_contextvars() == {}


class TestLogOutput:
    def setup_method(self):
        clear_contextvars()
        configure_logging(json_format=True, log_level="DEBUG")

    def teardown_method(self):
        clear_contextvars()

    def test_event_is_emitted(self, caplog):
        logger = get_logger("test.json_output")
        bind_contextvars(request_id="req-1")

        with caplog.at_level(logging.DEBUG, logger="test.json_output"):
            logger.info("rent_payment_upserted", rent_payment_id=7)

        assert "rent_payment_upserted" in caplog.text

    def test_log_with_exception(self, caplog):
        logger = get_logger("test.exception")

        with caplog.at_level(logging.DEBUG, logger="test.exception"):
            try:
                raise ValueError("Test error")
            except ValueError:
                logger.exception("stripe_webhook_handler_error")

        assert "stripe_webhook_handler_error" in caplog.text
        assert "ValueError" in caplog.text
