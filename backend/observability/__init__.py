"""
OpenTelemetry observability package for the AI operations service.

Usage:
    from backend.observability import (
        configure_observability,
        get_tracer,
        OperationMetrics,
    )

    # Initialize in application startup
    configure_observability(settings)

    # Access metrics
    OperationMetrics.operation_requests_total().add(1, {"operation": "analyzeMarket"})
"""

from opentelemetry import trace

from backend.observability.config import configure_observability, shutdown_observability
from backend.observability.metrics import OperationMetrics

_TRACER_NAME = "startupstack-ai"


def get_tracer() -> trace.Tracer:
    """Get the service tracer. No-op until configure_observability runs."""
    return trace.get_tracer(_TRACER_NAME)


__all__ = [
    "configure_observability",
    "shutdown_observability",
    "get_tracer",
    "OperationMetrics",
]
