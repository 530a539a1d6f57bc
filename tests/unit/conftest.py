"""Conftest for unit tests - mark every test as unit and isolate shared state."""

import pytest

from mcp_docs_server.observability import context, tracing


def pytest_collection_modifyitems(config, items):
    """Automatically mark all tests in the unit directory as unit tests."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)


@pytest.fixture(autouse=True)
def reset_observability_state():
    """Start every test without a bound tool or cached tracer."""
    context.trace_context.set(None)
    tracing._tracer_holder["tracer"] = None
    yield
    context.trace_context.set(None)
    tracing._tracer_holder["tracer"] = None
