"""Metrics module using Prometheus."""

from .prometheus_metrics import (
    ConversionMetrics,
    HttpMetrics,
    setup_metrics,
    get_metrics_handler,
)

__all__ = [
    "ConversionMetrics",
    "HttpMetrics",
    "setup_metrics",
    "get_metrics_handler",
]
