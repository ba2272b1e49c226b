"""Unit tests for logging configuration."""

import json
import logging
import sys

import pytest
from opentelemetry.sdk.trace import TracerProvider

from verity.config import Settings
from verity.core.logging import JsonFormatter, TraceContextFilter, setup_logging


def _record(message: str = "Verification request 1 approved", exc_info=None) -> logging.LogRecord:
    record = logging.LogRecord(
        "verity.services.verification_service", logging.INFO, __file__, 1, message, None, exc_info
    )
    TraceContextFilter().filter(record)
    return record


@pytest.fixture
def root_handlers():
    """Restore the root logger after setup_logging replaces its handlers."""
    root_logger = logging.getLogger()
    engine_logger = logging.getLogger("sqlalchemy.engine")
    saved_handlers, saved_level = root_logger.handlers[:], root_logger.level
    saved_engine_level = engine_logger.level
    yield
    root_logger.handlers[:] = saved_handlers
    root_logger.setLevel(saved_level)
    engine_logger.setLevel(saved_engine_level)


def test_json_formatter_outside_span():
    """Test records logged without an active span carry no trace IDs."""
    output = json.loads(JsonFormatter("verity").format(_record()))

    assert output["message"] == "Verification request 1 approved"
    assert output["level"] == "INFO"
    assert output["logger"] == "verity.services.verification_service"
    assert output["service"] == "verity"
    assert "trace_id" not in output
    assert "span_id" not in output


def test_json_formatter_inside_span():
    """Test records logged inside a span carry its trace and span IDs."""
    tracer = TracerProvider().get_tracer(__name__)

    with tracer.start_as_current_span("verification.approve_request") as span:
        record = _record()

    context = span.get_span_context()
    output = json.loads(JsonFormatter("verity").format(record))
    assert output["trace_id"] == format(context.trace_id, "032x")
    assert output["span_id"] == format(context.span_id, "016x")


def test_json_formatter_exception():
    """Test tracebacks are included."""
    try:
        raise ValueError("boom")
    except ValueError:
        record = _record("failed", exc_info=sys.exc_info())

    output = json.loads(JsonFormatter("verity").format(record))
    assert "ValueError: boom" in output["exception"]


def test_setup_logging_production(root_handlers):
    """Test production logging emits JSON tagged with the service name."""
    setup_logging(Settings(environment="production", otel_service_name="verity-prod"))

    (handler,) = logging.getLogger().handlers
    assert isinstance(handler.formatter, JsonFormatter)
    assert handler.formatter.service_name == "verity-prod"
    assert any(isinstance(f, TraceContextFilter) for f in handler.filters)
    assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING


def test_setup_logging_development(root_handlers):
    """Test development logging is plain text with the trace ID."""
    setup_logging(Settings(environment="development", debug=True, db_echo=True))

    root_logger = logging.getLogger()
    (handler,) = root_logger.handlers
    assert not isinstance(handler.formatter, JsonFormatter)
    assert "otel_trace_id" in handler.formatter._fmt
    assert root_logger.level == logging.DEBUG
    assert logging.getLogger("sqlalchemy.engine").level == logging.INFO
