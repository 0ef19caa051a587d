"""
Metrics definitions for the AI operations service.

Defines all metrics using OpenTelemetry Meter API. Without a configured
MeterProvider the API hands out no-op instruments, so recording is always safe.
"""

import logging
from typing import Optional

from opentelemetry import metrics

logger = logging.getLogger(__name__)

_METER_NAME = "startupstack-ai"


def _get_meter() -> metrics.Meter:
    """Get the metrics meter instance."""
    return metrics.get_meter(_METER_NAME)


class OperationMetrics:
    """
    Centralized metrics for AI operations.

    All metrics are lazily initialized on first access.
    """

    _operation_requests_total: Optional[metrics.Counter] = None
    _quota_denials_total: Optional[metrics.Counter] = None
    _generation_seconds: Optional[metrics.Histogram] = None
    _client_retries_total: Optional[metrics.Counter] = None

    @classmethod
    def operation_requests_total(cls) -> metrics.Counter:
        """Counter for dispatched operations by kind and outcome."""
        if cls._operation_requests_total is None:
            cls._operation_requests_total = _get_meter().create_counter(
                name="operation_requests_total",
                description="Total number of AI operation requests",
                unit="1",
            )
        return cls._operation_requests_total

    @classmethod
    def quota_denials_total(cls) -> metrics.Counter:
        """Counter for free-trial quota denials by kind."""
        if cls._quota_denials_total is None:
            cls._quota_denials_total = _get_meter().create_counter(
                name="quota_denials_total",
                description="Total free-trial quota denials",
                unit="1",
            )
        return cls._quota_denials_total

    @classmethod
    def generation_seconds(cls) -> metrics.Histogram:
        """Histogram for generation backend latency."""
        if cls._generation_seconds is None:
            cls._generation_seconds = _get_meter().create_histogram(
                name="generation_seconds",
                description="Duration of generation backend calls",
                unit="s",
            )
        return cls._generation_seconds

    @classmethod
    def client_retries_total(cls) -> metrics.Counter:
        """Counter for client-side retries by error kind."""
        if cls._client_retries_total is None:
            cls._client_retries_total = _get_meter().create_counter(
                name="client_retries_total",
                description="Total dispatch attempts retried by the client",
                unit="1",
            )
        return cls._client_retries_total
