"""Prometheus metrics definitions and helpers.

Provides the HTTP and conversion metrics exposed by the pname service.
"""

from typing import Callable

from prometheus_client import (
    Counter,
    Gauge,
    Histogram,
    generate_latest,
    REGISTRY,
    CollectorRegistry,
)


class HttpMetrics:
    """HTTP request metrics."""

    def __init__(self, registry: CollectorRegistry = REGISTRY) -> None:
        self.requests_total = Counter(
            "http_requests_total",
            "Total HTTP requests",
            ["method", "endpoint", "status"],
            registry=registry,
        )

        self.request_duration = Histogram(
            "http_request_duration_seconds",
            "HTTP request duration in seconds",
            ["method", "endpoint"],
            registry=registry,
        )

        self.requests_in_progress = Gauge(
            "http_requests_in_progress",
            "HTTP requests currently in progress",
            ["method", "endpoint"],
            registry=registry,
        )


class ConversionMetrics:
    """Name conversion metrics."""

    def __init__(self, registry: CollectorRegistry = REGISTRY) -> None:
        """Initialize conversion metrics.

        Args:
            registry: Prometheus registry to use
        """
        # Lines converted
        self.lines_converted = Counter(
            "pname_lines_converted_total",
            "Total number of logical name lines converted",
            ["style"],
            registry=registry,
        )

        # Rejected conversions
        self.conversion_failures = Counter(
            "pname_conversion_failures_total",
            "Total number of conversion requests rejected",
            ["error_type"],
            registry=registry,
        )

        # Conversion duration
        self.conversion_duration = Histogram(
            "pname_conversion_duration_seconds",
            "Time spent converting one batch",
            ["style"],
            buckets=[0.0005, 0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0],
            registry=registry,
        )

        # Batch size
        self.batch_lines = Histogram(
            "pname_batch_lines",
            "Number of lines in a conversion batch",
            buckets=[1, 5, 10, 50, 100, 500, 1000, 5000, 10000],
            registry=registry,
        )

        # Loaded dictionary size
        self.dictionary_entries = Gauge(
            "pname_dictionary_entries",
            "Number of entries in the loaded word dictionary",
            registry=registry,
        )


def setup_metrics(registry: CollectorRegistry = REGISTRY) -> tuple[HttpMetrics, ConversionMetrics]:
    """Setup and return metric instances.

    Returns:
        Tuple of (HttpMetrics, ConversionMetrics)
    """
    return HttpMetrics(registry), ConversionMetrics(registry)


def get_metrics_handler(registry: CollectorRegistry = REGISTRY) -> Callable[[], bytes]:
    """Get metrics handler for HTTP endpoint.

    Returns:
        Function that generates Prometheus metrics output
    """

    def metrics_handler() -> bytes:
        return generate_latest(registry)

    return metrics_handler
