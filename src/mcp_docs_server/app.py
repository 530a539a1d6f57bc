"""MCP documentation server entry point.

Startup is a single synchronous phase: settings, logging, corpus load and
index build. The FastMCP server then serves read-only tool calls against the
immutable index over stdio (default) or streamable HTTP.
"""

import logging
import sys

from fastmcp import FastMCP
from opentelemetry.sdk.trace.export import ConsoleSpanExporter
from pydantic import ValidationError
from starlette.requests import Request
from starlette.responses import Response

from mcp_docs_server.config import Settings
from mcp_docs_server.observability import configure_logging, get_metrics, get_metrics_content_type, init_tracing
from mcp_docs_server.service_layer.documentation_service import DocumentationService
from mcp_docs_server.tool_registry import DocsToolkit, register_tools


logger = logging.getLogger(__name__)


async def metrics_endpoint(_: Request) -> Response:
    """Prometheus exposition of the server metrics (http transport only)."""
    return Response(content=get_metrics(), media_type=get_metrics_content_type())


def create_server(settings: Settings, service: DocumentationService) -> FastMCP:
    """Create the FastMCP server and register the documentation tools."""
    instructions = (
        f"MCP documentation server with {len(service.get_all_sections())} indexed sections. "
        "Use search_mcp_docs for free-form questions, troubleshoot_connection for client errors, "
        "and validate_oauth_flow to check an OAuth setup."
    )

    mcp = FastMCP(
        name=settings.docs_server_name,
        instructions=instructions,
        mask_error_details=True,
    )
    register_tools(mcp, DocsToolkit(service))
    mcp.custom_route("/metrics", methods=["GET"])(metrics_endpoint)
    return mcp


def build_app(settings: Settings | None = None) -> tuple[FastMCP, DocumentationService]:
    """Load the corpus, build the index and create the server."""
    settings = settings or Settings()  # type: ignore[call-arg]
    service = DocumentationService(settings)
    service.initialize()
    return create_server(settings, service), service


def main() -> None:
    """Main entry point for the documentation server."""
    try:
        settings = Settings()  # type: ignore[call-arg]
    except ValidationError as exc:
        configure_logging()
        logger.error("Configuration is invalid: %s", exc)
        raise SystemExit(1) from exc

    configure_logging(settings.log_level, settings.log_json, logger_levels=settings.log_logger_levels)
    init_tracing(
        service_name=settings.docs_server_name,
        exporter=ConsoleSpanExporter(out=sys.stderr) if settings.trace_console else None,
    )

    logger.info("Starting MCP docs server (data_dir=%s)", settings.resolve_data_dir())
    mcp, service = build_app(settings)
    logger.info("MCP docs server ready with %d sections on %s", len(service.get_all_sections()), settings.mcp_transport)

    if settings.mcp_transport == "http":
        mcp.run(transport="http", host=settings.mcp_host, port=settings.mcp_port)
    else:
        mcp.run()


if __name__ == "__main__":
    main()
