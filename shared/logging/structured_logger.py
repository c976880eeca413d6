"""Structured logging configuration using structlog.

The API logs JSON lines; the batch CLI logs human-readable lines to stderr so
that converted names on stdout stay clean. Every entry carries the app name,
the deployment environment and, inside a recording span, the trace ids.
"""

import logging
import sys
from typing import Any, List, Optional, TextIO

import structlog
from opentelemetry import trace
from structlog.types import EventDict, Processor

APP_NAME = "pname"


def app_context(environment: str) -> Processor:
    """Build a processor stamping ``app`` and ``environment`` on each entry."""

    def add_app_context(logger: logging.Logger, method_name: str, event_dict: EventDict) -> EventDict:
        event_dict.setdefault("app", APP_NAME)
        event_dict.setdefault("environment", environment)
        return event_dict

    return add_app_context


def add_trace_context(logger: logging.Logger, method_name: str, event_dict: EventDict) -> EventDict:
    span = trace.get_current_span()
    if span.is_recording():
        span_context = span.get_span_context()
        event_dict["trace_id"] = format(span_context.trace_id, "032x")
        event_dict["span_id"] = format(span_context.span_id, "016x")
    return event_dict


def _processor_chain(environment: str, json_logs: bool) -> List[Processor]:
    renderer: Processor = (
        structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer(colors=False)
    )
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        app_context(environment),
        add_trace_context,
        renderer,
    ]


def configure_logging(
    log_level: str = "INFO",
    json_logs: bool = True,
    service_name: Optional[str] = None,
    environment: str = "development",
    stream: TextIO = sys.stdout,
) -> None:
    """Configure structlog and the standard logging handler it writes through.

    Args:
        log_level: Level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_logs: JSON lines when true, console lines otherwise
        service_name: Bound as ``service`` on every entry when given
        environment: Deployment environment reported with every entry
        stream: Where log lines are written
    """
    structlog.configure(
        processors=_processor_chain(environment, json_logs),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=stream,
        level=getattr(logging, log_level.upper()),
        force=True,
    )

    if service_name:
        structlog.contextvars.bind_contextvars(service=service_name)


def bind_context(**kwargs: Any) -> None:
    """Bind context variables to all subsequent log entries in this context."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()
