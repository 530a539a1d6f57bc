"""Context propagation for log/trace correlation across async boundaries."""

from __future__ import annotations

from contextvars import ContextVar, Token
from typing import TYPE_CHECKING
from uuid import uuid4


if TYPE_CHECKING:
    from opentelemetry.trace import Span

# Per-task context carrying trace_id, span_id and the active tool name
trace_context: ContextVar[dict | None] = ContextVar("trace_context", default=None)


def generate_trace_id() -> str:
    """Generate a 32-char hex trace ID."""
    return uuid4().hex


def generate_span_id() -> str:
    """Generate a 16-char hex span ID."""
    return uuid4().hex[:16]


def get_trace_context() -> dict:
    """Get current trace context, creating ids on first use."""
    ctx = trace_context.get()
    if ctx is None or not ctx.get("trace_id"):
        ctx = {"trace_id": generate_trace_id(), "span_id": generate_span_id()}
        trace_context.set(ctx)
    return ctx


def set_trace_context(trace_id: str, span_id: str, **extra: object) -> Token:
    """Set trace context for the current async context.

    Returns:
        Token that restores the previous context via trace_context.reset().
    """
    return trace_context.set({"trace_id": trace_id, "span_id": span_id, **extra})


def with_otel_span(span: Span) -> dict | None:
    """Extract trace context from an OpenTelemetry span (None for non-recording spans)."""
    ctx = span.get_span_context()
    if not ctx.is_valid:
        return None
    return {
        "trace_id": format(ctx.trace_id, "032x"),
        "span_id": format(ctx.span_id, "016x"),
    }


def start_request_context(tool_name: str) -> Token:
    """Open a fresh trace context for one MCP tool call.

    Each call gets its own trace_id even though request tasks inherit the
    context that was active when the server started.
    """
    return set_trace_context(generate_trace_id(), generate_span_id(), tool=tool_name)
