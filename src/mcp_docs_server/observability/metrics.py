"""Prometheus metrics for golden signals observability."""

from __future__ import annotations

from contextlib import contextmanager
import time
from typing import TYPE_CHECKING

from prometheus_client import CONTENT_TYPE_LATEST, Counter, Gauge, Histogram, generate_latest


if TYPE_CHECKING:
    from collections.abc import Generator


REQUEST_LATENCY = Histogram(
    "mcp_docs_request_latency_seconds",
    "Tool request latency in seconds",
    ["tool"],
    buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0),
)

REQUEST_COUNT = Counter(
    "mcp_docs_requests_total",
    "Total MCP tool requests",
    ["tool", "status"],
)

SEARCH_LATENCY = Histogram(
    "mcp_docs_search_latency_seconds",
    "Index query latency",
    ["category"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0),
)

INDEX_DOC_COUNT = Gauge(
    "mcp_docs_index_document_count",
    "Documents in the search index",
)

INDEX_LOAD_ERRORS = Counter(
    "mcp_docs_load_errors_total",
    "Corpus files skipped because they could not be loaded",
)


@contextmanager
def track_latency(histogram: Histogram, **labels: str) -> Generator[None, None, None]:
    """Context manager to track operation latency."""
    start = time.perf_counter()
    try:
        yield
    finally:
        elapsed = time.perf_counter() - start
        if labels:
            histogram.labels(**labels).observe(elapsed)
        else:
            histogram.observe(elapsed)


def get_metrics() -> bytes:
    """Generate Prometheus metrics output."""
    return generate_latest()


def get_metrics_content_type() -> str:
    """Get content type for metrics output."""
    return CONTENT_TYPE_LATEST
