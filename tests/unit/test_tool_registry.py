"""Unit tests for the MCP documentation tools."""

from __future__ import annotations

from collections.abc import Callable
import logging
from typing import Any

from prometheus_client import REGISTRY
import pytest

from mcp_docs_server.config import Settings
from mcp_docs_server.observability.context import get_trace_context
from mcp_docs_server.service_layer.documentation_service import DocumentationService
from mcp_docs_server.tool_registry import REQUIRED_OAUTH_ENDPOINTS, DocsToolkit, register_tools, remap_error


class ContextRecorder(logging.Handler):
    """Captures the trace context active when each record is emitted."""

    def __init__(self) -> None:
        super().__init__(level=logging.DEBUG)
        self.contexts: list[dict[str, Any]] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.contexts.append(dict(get_trace_context()))


class ToolCaptureMCP:
    """Minimal FastMCP stub that records registered tools."""

    def __init__(self) -> None:
        self.tools: dict[str, dict[str, Any]] = {}

    def tool(
        self, name: str, annotations: dict[str, Any] | None = None
    ) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
            self.tools[name] = {"func": func, "annotations": annotations or {}}
            return func

        return decorator


@pytest.fixture
def service(mcp_corpus) -> DocumentationService:
    docs_service = DocumentationService(Settings())
    docs_service.initialize(mcp_corpus)
    return docs_service


@pytest.fixture
def toolkit(service) -> DocsToolkit:
    return DocsToolkit(service)


@pytest.fixture
def captured(toolkit) -> ToolCaptureMCP:
    mcp = ToolCaptureMCP()
    register_tools(mcp, toolkit)  # type: ignore[arg-type]
    return mcp


def _request_count(tool: str, status: str) -> float:
    return REGISTRY.get_sample_value("mcp_docs_requests_total", {"tool": tool, "status": status}) or 0.0


@pytest.mark.unit
class TestRemapError:
    @pytest.mark.parametrize(
        ("error", "terms"),
        [
            ("Claude was unable to connect", "transport oauth endpoints"),
            ("HTTP 401 Unauthorized", "oauth authentication bearer token"),
            ("Session not found", "session management headers"),
            ("invalid grant from token endpoint", "PKCE oauth flow"),
            ("socket hang up", "socket hang up"),
        ],
    )
    def test_remap(self, error, terms):
        assert remap_error(error) == terms

    def test_first_rule_wins(self):
        assert remap_error("unable to connect: 401") == "transport oauth endpoints"


@pytest.mark.unit
class TestDocsToolkit:
    """Tests for tool output formatting."""

    def test_search_docs(self, toolkit):
        text = toolkit.search_docs("SSE")

        assert text.startswith("Found ")
        assert 'results for "SSE":\n\n**SSE Transport** (examples)\nSSE Transport\n' in text
        assert "Source: data/sse_transport.md" in text
        assert text.count("Source: ") <= 5

    def test_search_docs_without_results(self, toolkit):
        assert toolkit.search_docs("zzzzqqqq") == 'Found 0 results for "zzzzqqqq":\n\n'

    def test_transport_examples(self, toolkit):
        text = toolkit.transport_examples("sse")

        assert text.startswith("Transport examples for sse:\n\n")
        assert "**SSE Transport**\nUse Server-Sent Events" in text

    def test_transport_examples_only_examples(self, toolkit):
        text = toolkit.transport_examples("both")

        assert text.startswith("Transport examples for both:\n\n")
        assert "Claude was unable to connect" not in text
        assert "Authorization" not in text

    def test_troubleshoot(self, toolkit):
        text = toolkit.troubleshoot("Claude was unable to connect", "claude-web")

        assert text.startswith('Troubleshooting "Claude was unable to connect" for claude-web:\n\n')
        assert "**Solution: Claude was unable to connect**\nCheck that the oauth endpoints" in text

    def test_troubleshoot_without_matches(self, document_factory):
        service = DocumentationService(Settings())
        service.initialize([document_factory("only", "SSE Transport", "Streaming")])

        text = DocsToolkit(service).troubleshoot("socket hang up")

        assert text == (
            'Troubleshooting "socket hang up" for unknown:\n\n'
            "No specific troubleshooting found. Try searching for related terms."
        )

    def test_validate_oauth_compliant(self, toolkit):
        text = toolkit.validate_oauth(
            endpoints=[
                "https://example.com/.well-known/oauth-authorization-server",
                "https://example.com/.well-known/oauth-protected-resource",
                "https://example.com/authorize",
                "https://example.com/token",
            ],
            features=["PKCE", "dynamic registration"],
        )

        assert text == (
            "OAuth Validation Results:\n\n"
            "✅ Required endpoints: 4/4\n"
            "✅ PKCE support: Yes\n"
            "✅ Dynamic registration: Yes\n\n"
            "🎉 OAuth implementation looks compliant!"
        )

    def test_validate_oauth_missing_pieces(self, toolkit):
        text = toolkit.validate_oauth(endpoints=["/authorize", "/token"], features=[])

        assert text == (
            "OAuth Validation Results:\n\n"
            "✅ Required endpoints: 2/4\n"
            "❌ Missing: /.well-known/oauth-authorization-server, /.well-known/oauth-protected-resource\n"
            "✅ PKCE support: No\n"
            "✅ Dynamic registration: No\n\n"
            "⚠️  Implementation needs updates for Claude compatibility."
        )

    def test_validate_oauth_feature_names_are_exact(self, toolkit):
        text = toolkit.validate_oauth(
            endpoints=list(REQUIRED_OAUTH_ENDPOINTS),
            features=["pkce", "Dynamic Registration"],
        )

        assert "PKCE support: No" in text
        assert "Dynamic registration: No" in text
        assert text.endswith("Implementation needs updates for Claude compatibility.")

    def test_validate_oauth_without_arguments(self, toolkit):
        assert "Required endpoints: 0/4" in toolkit.validate_oauth()

    def test_working_templates_header(self, toolkit):
        text = toolkit.working_templates("cloudflare", auth=True)

        assert text.startswith("Working templates for cloudflare (auth: true):\n\n")
        assert text.count("\n---\n\n") <= 1


@pytest.mark.unit
class TestRegisteredTools:
    """Tests for the FastMCP tool wrappers."""

    def test_registers_five_read_only_tools(self, captured):
        assert set(captured.tools) == {
            "search_mcp_docs",
            "get_transport_examples",
            "troubleshoot_connection",
            "validate_oauth_flow",
            "get_working_templates",
        }
        assert all(tool["annotations"]["readOnlyHint"] for tool in captured.tools.values())

    @pytest.mark.asyncio
    async def test_search_tool_counts_success(self, captured):
        before = _request_count("search_mcp_docs", "ok")

        text = await captured.tools["search_mcp_docs"]["func"](query="oauth", category="specification")

        assert "**Authorization** (specification)" in text
        assert _request_count("search_mcp_docs", "ok") == before + 1

    @pytest.mark.asyncio
    async def test_each_call_logs_under_its_own_trace(self, captured):
        recorder = ContextRecorder()
        services_logger = logging.getLogger("mcp_docs_server.service_layer.services")
        services_logger.addHandler(recorder)
        services_logger.setLevel(logging.DEBUG)
        startup = dict(get_trace_context())
        try:
            await captured.tools["search_mcp_docs"]["func"](query="oauth")
            await captured.tools["search_mcp_docs"]["func"](query="transport")
        finally:
            services_logger.removeHandler(recorder)
            services_logger.setLevel(logging.NOTSET)

        first, second = recorder.contexts
        assert first["tool"] == second["tool"] == "search_mcp_docs"
        assert len({first["trace_id"], second["trace_id"], startup["trace_id"]}) == 3
        assert get_trace_context() == startup

    @pytest.mark.asyncio
    async def test_invalid_category_returns_error_text(self, captured):
        before = _request_count("search_mcp_docs", "rejected")

        text = await captured.tools["search_mcp_docs"]["func"](query="oauth", category="recipes")

        assert text.startswith("Error: Unknown category 'recipes'")
        assert _request_count("search_mcp_docs", "rejected") == before + 1

    @pytest.mark.asyncio
    async def test_troubleshoot_defaults_client(self, captured):
        text = await captured.tools["troubleshoot_connection"]["func"](error="401 Unauthorized")

        assert text.startswith('Troubleshooting "401 Unauthorized" for unknown:')

    @pytest.mark.asyncio
    async def test_validate_oauth_tool(self, captured):
        text = await captured.tools["validate_oauth_flow"]["func"](features=["PKCE"])

        assert "PKCE support: Yes" in text

    @pytest.mark.asyncio
    async def test_templates_and_transport_tools(self, captured):
        templates = await captured.tools["get_working_templates"]["func"]()
        transport = await captured.tools["get_transport_examples"]["func"](transport="streamable")

        assert templates.startswith("Working templates for any (auth: false):")
        assert transport.startswith("Transport examples for streamable:\n\n")
        assert "**Streamable HTTP transport**" in transport
