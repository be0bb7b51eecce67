"""Shared telemetry: logging setup, OpenTelemetry config, and tracing helpers."""

from agentflow.shared.telemetry.logging import get_logger, setup_logging
from agentflow.shared.telemetry.telemetry import (
    TelemetryConfig,
    get_telemetry,
    init_telemetry,
    set_telemetry,
)
from agentflow.shared.telemetry.tracing import (
    add_span_attributes,
    add_span_event,
    traced,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "TelemetryConfig",
    "get_telemetry",
    "init_telemetry",
    "set_telemetry",
    "traced",
    "add_span_attributes",
    "add_span_event",
]
