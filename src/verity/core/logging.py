"""Logging configuration.

Every record is stamped with the active OpenTelemetry trace and span IDs, so
log lines written inside a verification operation can be joined to the span
the service opened for it.
"""

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any

from opentelemetry import trace

from verity.config import Settings

NO_TRACE = "-"

PLAIN_FORMAT = "%(asctime)s %(levelname)s [%(name)s] [trace=%(otel_trace_id)s] %(message)s"


class TraceContextFilter(logging.Filter):
    """Attach the current span's trace and span IDs to each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        context = trace.get_current_span().get_span_context()
        if context.is_valid:
            record.otel_trace_id = format(context.trace_id, "032x")
            record.otel_span_id = format(context.span_id, "016x")
        else:
            record.otel_trace_id = NO_TRACE
            record.otel_span_id = NO_TRACE
        return True


class JsonFormatter(logging.Formatter):
    """One JSON object per record, tagged with service and trace context."""

    def __init__(self, service_name: str):
        super().__init__()
        self.service_name = service_name

    def format(self, record: logging.LogRecord) -> str:
        log_record: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "service": self.service_name,
            "message": record.getMessage(),
        }

        trace_id = getattr(record, "otel_trace_id", NO_TRACE)
        if trace_id != NO_TRACE:
            log_record["trace_id"] = trace_id
            log_record["span_id"] = record.otel_span_id

        if record.exc_info:
            log_record["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_record)


def setup_logging(settings: Settings) -> None:
    """
    Route all logging to stdout: JSON in production, plain text elsewhere.

    Args:
        settings: Application settings
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if settings.debug else logging.INFO)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(TraceContextFilter())
    if settings.environment == "production":
        handler.setFormatter(JsonFormatter(settings.otel_service_name))
    else:
        handler.setFormatter(logging.Formatter(PLAIN_FORMAT))
    root_logger.addHandler(handler)

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.db_echo else logging.WARNING
    )
