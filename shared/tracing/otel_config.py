"""OpenTelemetry configuration for distributed tracing.

Spans are exported over OTLP/HTTP when an endpoint is configured, otherwise
to the console.
"""

import functools
from contextlib import contextmanager
import inspect
from typing import Any, Callable, Iterator, Optional, TypeVar

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from opentelemetry.sdk.trace.sampling import TraceIdRatioBased
from opentelemetry.trace import Status, StatusCode

F = TypeVar("F", bound=Callable[..., Any])


def configure_tracing(
    service_name: str,
    service_version: str = "0.1.0",
    otlp_endpoint: Optional[str] = None,
    sampling_rate: float = 0.1,
) -> TracerProvider:
    """Configure OpenTelemetry tracing for the service.

    Args:
        service_name: Name of the service (e.g., "pname-api")
        service_version: Version reported in the resource attributes
        otlp_endpoint: OTLP/HTTP traces endpoint; console export when None
        sampling_rate: Sampling rate (0.0 to 1.0)

    Returns:
        Configured TracerProvider
    """
    resource = Resource(
        attributes={
            "service.name": service_name,
            "service.namespace": "pname",
            "service.version": service_version,
        }
    )

    provider = TracerProvider(resource=resource, sampler=TraceIdRatioBased(sampling_rate))

    exporter = OTLPSpanExporter(endpoint=otlp_endpoint) if otlp_endpoint else ConsoleSpanExporter()
    provider.add_span_processor(BatchSpanProcessor(exporter))

    trace.set_tracer_provider(provider)

    return provider


def get_tracer(name: str) -> trace.Tracer:
    """Get a tracer instance."""
    return trace.get_tracer(name)


@contextmanager
def _function_span(func: Callable[..., Any], span_name: Optional[str]) -> Iterator[trace.Span]:
    tracer = get_tracer(func.__module__)
    with tracer.start_as_current_span(
        span_name or func.__qualname__, record_exception=False, set_status_on_exception=False
    ) as span:
        span.set_attribute("code.function", func.__qualname__)
        span.set_attribute("code.namespace", func.__module__)
        try:
            yield span
        except Exception as exc:
            span.record_exception(exc)
            span.set_status(Status(StatusCode.ERROR, str(exc)))
            raise
        span.set_status(Status(StatusCode.OK))


def trace_function(span_name: Optional[str] = None) -> Callable[[F], F]:
    """Decorator running a sync or async function inside its own span.

    Exceptions are recorded on the span and re-raised.

    Args:
        span_name: Span name; the function's qualified name when None
    """

    def decorator(func: F) -> F:
        if inspect.iscoroutinefunction(func):

            @functools.wraps(func)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                with _function_span(func, span_name):
                    return await func(*args, **kwargs)

            return async_wrapper  # type: ignore

        @functools.wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            with _function_span(func, span_name):
                return func(*args, **kwargs)

        return sync_wrapper  # type: ignore

    return decorator
