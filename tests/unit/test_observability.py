"""Unit tests for the shared logging, metrics and tracing helpers."""

import io
import json

import pytest
import structlog
from prometheus_client import CollectorRegistry
from prometheus_client.parser import text_string_to_metric_families

from shared.logging import bind_context, clear_context, configure_logging
from shared.metrics import get_metrics_handler, setup_metrics
from shared.tracing import trace_function


class TestTraceFunction:
    """trace_function is transparent to the wrapped callable."""

    def test_sync_result(self):
        @trace_function("test.add")
        def add(a, b):
            return a + b

        assert add(2, 3) == 5
        assert add.__name__ == "add"

    def test_sync_exception_propagates(self):
        @trace_function()
        def fail():
            raise ValueError("boom")

        with pytest.raises(ValueError, match="boom"):
            fail()

    @pytest.mark.asyncio
    async def test_async_result(self):
        @trace_function()
        async def double(x):
            return x * 2

        assert await double(21) == 42


class TestMetrics:
    """Per-registry metric sets."""

    def test_independent_registries(self):
        first = CollectorRegistry()
        second = CollectorRegistry()
        _, conversion = setup_metrics(first)
        setup_metrics(second)

        conversion.lines_converted.labels(style="UPPER_SNAKE").inc(3)

        assert first.get_sample_value("pname_lines_converted_total", {"style": "UPPER_SNAKE"}) == 3.0
        assert second.get_sample_value("pname_lines_converted_total", {"style": "UPPER_SNAKE"}) is None

    def test_handler_exposes_registry(self):
        registry = CollectorRegistry()
        http, _ = setup_metrics(registry)
        http.requests_total.labels(method="POST", endpoint="/pname", status=200).inc()

        output = get_metrics_handler(registry)().decode()
        samples = [
            sample
            for family in text_string_to_metric_families(output)
            for sample in family.samples
            if sample.name == "http_requests_total"
        ]

        assert registry.get_sample_value(
            "http_requests_total", {"method": "POST", "endpoint": "/pname", "status": "200"}
        ) == 1.0
        assert [(s.labels, s.value) for s in samples] == [
            ({"method": "POST", "endpoint": "/pname", "status": "200"}, 1.0)
        ]


class TestLogging:
    """Log output in both renderings."""

    def test_json_entries_carry_context(self):
        stream = io.StringIO()
        configure_logging(
            log_level="INFO",
            json_logs=True,
            service_name="pname-test",
            environment="staging",
            stream=stream,
        )
        clear_context()
        bind_context(correlation_id="abc")

        structlog.get_logger("tests.logging").info("something_happened", lines=2)
        clear_context()

        entry = json.loads(stream.getvalue().strip().splitlines()[-1])
        assert entry["event"] == "something_happened"
        assert entry["lines"] == 2
        assert entry["correlation_id"] == "abc"
        assert entry["app"] == "pname"
        assert entry["environment"] == "staging"
        assert entry["level"] == "info"

    def test_console_entries_for_cli(self):
        stream = io.StringIO()
        configure_logging(log_level="INFO", json_logs=False, environment="cli", stream=stream)
        clear_context()

        structlog.get_logger("tests.logging").info("batch_converted", lines=3)

        line = stream.getvalue().strip().splitlines()[-1]
        assert "batch_converted" in line
        assert "lines=3" in line
        assert "environment=cli" in line
        assert not line.startswith("{")
