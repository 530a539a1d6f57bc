"""OpenTelemetry tracing for tool calls and index queries.

Spans always feed the trace/span ids into the log context, so every log line
written inside a span can be correlated with it. Spans are only exported when
init_tracing() is given an exporter (see TRACE_CONSOLE in config).
"""

from __future__ import annotations

from contextlib import contextmanager
import logging
from typing import TYPE_CHECKING, Any

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.trace import SpanKind, Status, StatusCode

from mcp_docs_server.observability.context import set_trace_context, trace_context, with_otel_span


if TYPE_CHECKING:
    from collections.abc import Generator

    from opentelemetry.sdk.trace.export import SpanExporter
    from opentelemetry.trace import Span, Tracer

logger = logging.getLogger(__name__)

# Module-level tracer storage
_tracer_holder: dict[str, Tracer | None] = {"tracer": None}


def init_tracing(
    service_name: str = "mcp-docs-server",
    resource_attributes: dict[str, str] | None = None,
    *,
    exporter: SpanExporter | None = None,
) -> TracerProvider:
    """Initialize OpenTelemetry tracing.

    Args:
        service_name: Reported as the service.name resource attribute.
        resource_attributes: Extra resource attributes.
        exporter: Where finished spans are sent. Without one, spans are only
            used to correlate log lines and are dropped when they end.
    """
    attributes = {"service.name": service_name}
    if resource_attributes:
        attributes.update(resource_attributes)
    resource = Resource.create(attributes)
    provider = TracerProvider(resource=resource)
    if exporter is not None:
        provider.add_span_processor(BatchSpanProcessor(exporter))
    trace.set_tracer_provider(provider)
    _tracer_holder["tracer"] = provider.get_tracer(__name__)
    logger.info("Tracing initialized for service: %s (exporter=%s)", service_name, type(exporter).__name__)
    return provider


def get_tracer() -> Tracer:
    """Get the configured tracer, falling back to the global provider."""
    if _tracer_holder["tracer"] is None:
        _tracer_holder["tracer"] = trace.get_tracer(__name__)
    return _tracer_holder["tracer"]  # type: ignore[return-value]


@contextmanager
def create_span(
    name: str,
    kind: SpanKind = SpanKind.INTERNAL,
    attributes: dict[str, Any] | None = None,
) -> Generator[Span, None, None]:
    """Create a traced span and bind its ids to the log context for its duration."""
    tracer = get_tracer()
    with tracer.start_as_current_span(name, kind=kind) as span:
        if attributes:
            for key, value in attributes.items():
                span.set_attribute(key, value)

        # Non-recording spans carry no ids; keep the current context then
        ids = with_otel_span(span)
        token = None
        if ids is not None:
            extra = {k: v for k, v in (trace_context.get() or {}).items() if k not in ("trace_id", "span_id")}
            token = set_trace_context(ids["trace_id"], ids["span_id"], **extra)

        try:
            yield span
        except Exception as exc:
            span.set_status(Status(StatusCode.ERROR, str(exc)))
            span.record_exception(exc)
            raise
        finally:
            if token is not None:
                trace_context.reset(token)
