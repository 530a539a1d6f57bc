"""MCP tools built on top of the documentation search.

Five tools are exposed:

- search_mcp_docs: direct search with optional category filter
- get_transport_examples: fixed transport query, examples only
- troubleshoot_connection: error text remapped to search terms, troubleshooting only
- validate_oauth_flow: structural OAuth checklist (no index access)
- get_working_templates: platform/auth template query, examples only

Formatting lives on DocsToolkit so every tool is a deterministic function of
its arguments and the corpus; register_tools() only wires them into FastMCP.
"""

import logging
from typing import Annotated, Literal

from fastmcp import Context, FastMCP
from opentelemetry.trace import SpanKind

from mcp_docs_server.domain.model import Category
from mcp_docs_server.errors import QueryRejected
from mcp_docs_server.observability import (
    REQUEST_COUNT,
    REQUEST_LATENCY,
    start_request_context,
    trace_context,
    track_latency,
)
from mcp_docs_server.observability.tracing import create_span
from mcp_docs_server.service_layer.documentation_service import DocumentationService


logger = logging.getLogger(__name__)

RESULT_SEPARATOR = "\n---\n\n"

# Ordered (substring in lowercased error, search terms); first match wins
ERROR_SEARCH_TERMS: tuple[tuple[str, str], ...] = (
    ("unable to connect", "transport oauth endpoints"),
    ("401", "oauth authentication bearer token"),
    ("session not found", "session management headers"),
    ("invalid grant", "PKCE oauth flow"),
)

REQUIRED_OAUTH_ENDPOINTS: tuple[str, ...] = (
    "/.well-known/oauth-authorization-server",
    "/.well-known/oauth-protected-resource",
    "/authorize",
    "/token",
)

PKCE_FEATURE = "PKCE"
DYNAMIC_REGISTRATION_FEATURE = "dynamic registration"

OK_MARK = "\u2705"
MISSING_MARK = "\u274c"
COMPLIANT_MARK = "\U0001f389"
WARNING_MARK = "\u26a0\ufe0f"

TransportName = Literal["sse", "streamable", "both"]
LanguageName = Literal["typescript", "python", "both"]
ClientName = Literal["claude-web", "claude-desktop", "inspector", "other"]
PlatformName = Literal["cloudflare", "vercel", "local", "any"]
CategoryName = Literal["specification", "implementation", "troubleshooting", "examples"]


def remap_error(error: str) -> str:
    """Translate an error message into search terms.

    Example:
        >>> remap_error("Claude was unable to connect")
        'transport oauth endpoints'
        >>> remap_error("socket hang up")
        'socket hang up'
    """
    lowered = error.lower()
    for keyword, terms in ERROR_SEARCH_TERMS:
        if keyword in lowered:
            return terms
    return error


def _truncate(content: str, limit: int) -> str:
    return f"{content[:limit]}..."


class DocsToolkit:
    """Tool implementations over a DocumentationService."""

    def __init__(self, service: DocumentationService) -> None:
        self.service = service

    def search_docs(self, query: str, category: str | None = None) -> str:
        results = self.service.search(query, category)
        blocks = [
            f"**{r.document.title}** ({r.document.category.value})\n"
            f"{'... '.join(r.highlights)}\n"
            f"Source: {r.document.source}\n"
            for r in results[:5]
        ]
        return f'Found {len(results)} results for "{query}":\n\n' + RESULT_SEPARATOR.join(blocks)

    def transport_examples(self, transport: str) -> str:
        # The language choice is recorded on the span only; examples are not split by language
        query = "transport SSE streamable" if transport == "both" else f"{transport} transport"
        results = self.service.search(query, Category.EXAMPLES)
        blocks = [f"**{r.document.title}**\n{_truncate(r.document.content, 500)}\n" for r in results[:3]]
        return f"Transport examples for {transport}:\n\n" + RESULT_SEPARATOR.join(blocks)

    def troubleshoot(self, error: str, client: str = "unknown") -> str:
        results = self.service.search(remap_error(error), Category.TROUBLESHOOTING)
        header = f'Troubleshooting "{error}" for {client}:\n\n'
        if not results:
            return header + "No specific troubleshooting found. Try searching for related terms."
        blocks = [f"**Solution: {r.document.title}**\n{_truncate(r.document.content, 400)}\n" for r in results[:3]]
        return header + RESULT_SEPARATOR.join(blocks)

    def validate_oauth(self, endpoints: list[str] | None = None, features: list[str] | None = None) -> str:
        endpoints = endpoints or []
        features = features or []

        missing = [required for required in REQUIRED_OAUTH_ENDPOINTS if not any(required in e for e in endpoints)]
        # Feature names are matched exactly, as clients advertise them
        has_pkce = PKCE_FEATURE in features
        has_registration = DYNAMIC_REGISTRATION_FEATURE in features

        lines = [
            "OAuth Validation Results:",
            "",
            f"{OK_MARK} Required endpoints: "
            f"{len(REQUIRED_OAUTH_ENDPOINTS) - len(missing)}/{len(REQUIRED_OAUTH_ENDPOINTS)}",
        ]
        if missing:
            lines.append(f"{MISSING_MARK} Missing: {', '.join(missing)}")
        lines.append(f"{OK_MARK} PKCE support: {'Yes' if has_pkce else 'No'}")
        lines.append(f"{OK_MARK} Dynamic registration: {'Yes' if has_registration else 'No'}")
        lines.append("")
        if has_pkce and has_registration and not missing:
            lines.append(f"{COMPLIANT_MARK} OAuth implementation looks compliant!")
        else:
            lines.append(f"{WARNING_MARK}  Implementation needs updates for Claude compatibility.")
        return "\n".join(lines)

    def working_templates(self, platform: str = "any", auth: bool = False) -> str:
        query = f"{platform} {'oauth' if auth else 'authless'} template"
        results = self.service.search(query, Category.EXAMPLES)
        blocks = [f"**{r.document.title}**\n{_truncate(r.document.content, 600)}\n" for r in results[:2]]
        return f"Working templates for {platform} (auth: {str(auth).lower()}):\n\n" + RESULT_SEPARATOR.join(blocks)


def _run_tool(tool_name: str, attributes: dict[str, str], call) -> str:
    """Run one tool body with metrics, tracing and QueryRejected handling.

    Every call runs in its own trace context, restored when the call ends.
    """
    token = start_request_context(tool_name)
    try:
        with (
            track_latency(REQUEST_LATENCY, tool=tool_name),
            create_span(f"mcp.tool.{tool_name}", kind=SpanKind.INTERNAL, attributes=attributes) as span,
        ):
            span.set_attribute("mcp.tool.name", tool_name)
            try:
                text = call()
            except QueryRejected as exc:
                span.set_attribute("error", True)
                logger.warning("%s rejected input: %s", tool_name, exc)
                REQUEST_COUNT.labels(tool=tool_name, status="rejected").inc()
                return f"Error: {exc}"
            REQUEST_COUNT.labels(tool=tool_name, status="ok").inc()
            return text
    finally:
        trace_context.reset(token)


def register_tools(mcp: FastMCP, toolkit: DocsToolkit) -> None:
    @mcp.tool(name="search_mcp_docs", annotations={"title": "Search MCP Docs", "readOnlyHint": True})
    async def search_mcp_docs(
        query: Annotated[str, "Search query (e.g., 'SSE transport', 'OAuth flow', 'Claude won't connect')"],
        category: Annotated[CategoryName | None, "Filter by documentation category"] = None,
        ctx: Context | None = None,
    ) -> str:
        """Search across all MCP documentation, specifications, and examples."""
        logger.info("search_mcp_docs called - query='%s', category=%s", query[:50], category)
        return _run_tool(
            "search_mcp_docs",
            {"search.query": query[:100], "search.category": category or "all"},
            lambda: toolkit.search_docs(query, category),
        )

    @mcp.tool(name="get_transport_examples", annotations={"title": "Transport Examples", "readOnlyHint": True})
    async def get_transport_examples(
        transport: Annotated[TransportName, "Transport type to get examples for"],
        language: Annotated[LanguageName, "Programming language for examples"] = "typescript",
        ctx: Context | None = None,
    ) -> str:
        """Get specific transport implementation examples (SSE vs Streamable HTTP)."""
        logger.info("get_transport_examples called - transport=%s, language=%s", transport, language)
        return _run_tool(
            "get_transport_examples",
            {"transport": transport, "language": language},
            lambda: toolkit.transport_examples(transport),
        )

    @mcp.tool(name="troubleshoot_connection", annotations={"title": "Troubleshoot Connection", "readOnlyHint": True})
    async def troubleshoot_connection(
        error: Annotated[
            str, "Error message or symptom (e.g., 'Claude was unable to connect', '401 Unauthorized')"
        ],
        client: Annotated[ClientName | None, "MCP client being used"] = None,
        ctx: Context | None = None,
    ) -> str:
        """Diagnose common MCP connection issues and provide solutions."""
        logger.info("troubleshoot_connection called - error='%s', client=%s", error[:50], client)
        return _run_tool(
            "troubleshoot_connection",
            {"error": error[:100], "client": client or "unknown"},
            lambda: toolkit.troubleshoot(error, client or "unknown"),
        )

    @mcp.tool(name="validate_oauth_flow", annotations={"title": "Validate OAuth Flow", "readOnlyHint": True})
    async def validate_oauth_flow(
        endpoints: Annotated[list[str] | None, "List of implemented OAuth endpoints"] = None,
        features: Annotated[
            list[str] | None, "OAuth features implemented (e.g., 'PKCE', 'dynamic registration')"
        ] = None,
        ctx: Context | None = None,
    ) -> str:
        """Check OAuth 2.1 implementation against MCP requirements."""
        logger.info(
            "validate_oauth_flow called - endpoints=%d, features=%d", len(endpoints or []), len(features or [])
        )
        return _run_tool("validate_oauth_flow", {}, lambda: toolkit.validate_oauth(endpoints, features))

    @mcp.tool(name="get_working_templates", annotations={"title": "Working Templates", "readOnlyHint": True})
    async def get_working_templates(
        platform: Annotated[PlatformName, "Deployment platform"] = "any",
        auth: Annotated[bool, "Whether authentication is required"] = False,
        ctx: Context | None = None,
    ) -> str:
        """Get proven working MCP server templates and examples."""
        logger.info("get_working_templates called - platform=%s, auth=%s", platform, auth)
        return _run_tool(
            "get_working_templates",
            {"platform": platform, "auth": str(auth).lower()},
            lambda: toolkit.working_templates(platform, auth),
        )
