"""Observability module for tracing, metrics, and structured logging."""

from mcp_docs_server.observability.context import (
    get_trace_context,
    set_trace_context,
    start_request_context,
    trace_context,
)
from mcp_docs_server.observability.logging import JsonFormatter, configure_logging
from mcp_docs_server.observability.metrics import (
    INDEX_DOC_COUNT,
    INDEX_LOAD_ERRORS,
    REQUEST_COUNT,
    REQUEST_LATENCY,
    SEARCH_LATENCY,
    get_metrics,
    get_metrics_content_type,
    track_latency,
)
from mcp_docs_server.observability.tracing import create_span, get_tracer, init_tracing


__all__ = [
    "INDEX_DOC_COUNT",
    "INDEX_LOAD_ERRORS",
    "REQUEST_COUNT",
    "REQUEST_LATENCY",
    "SEARCH_LATENCY",
    "JsonFormatter",
    "configure_logging",
    "create_span",
    "get_metrics",
    "get_metrics_content_type",
    "get_trace_context",
    "get_tracer",
    "init_tracing",
    "set_trace_context",
    "start_request_context",
    "trace_context",
    "track_latency",
]
