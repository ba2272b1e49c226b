"""Telemetry module for OpenTelemetry instrumentation."""
from verity.telemetry.instrumentation import TelemetryManager, set_span_attributes

__all__ = [
    "TelemetryManager",
    "set_span_attributes",
]
