"""Shared test fixtures and configuration."""

from collections.abc import Callable
import os
from pathlib import Path

import pytest

from mcp_docs_server.domain.model import Category, Document


# Complete test environment that overrides every config value
TEST_ENV = {
    "DOCS_DATA_DIR": "data",
    "DOCS_SERVER_NAME": "mcp-docs-server-test",
    "SEARCH_THRESHOLD": "0.6",
    "SEARCH_MAX_SCORE": "1.0",
    "SEARCH_SCORE_COMBINATION": "product",
    "WEIGHT_TITLE": "0.4",
    "WEIGHT_CONTENT": "0.3",
    "WEIGHT_TAGS": "0.2",
    "WEIGHT_CATEGORY": "0.1",
    "HIGHLIGHT_CONTEXT_CHARS": "50",
    "MAX_QUERY_LENGTH": "256",
    "MCP_TRANSPORT": "stdio",
    "MCP_HOST": "127.0.0.1",
    "MCP_PORT": "15005",
    "LOG_LEVEL": "info",
    "LOG_JSON": "true",
    "LOG_LOGGER_LEVELS": "{}",
    "TRACE_CONSOLE": "false",
}


for key, value in TEST_ENV.items():
    os.environ[key] = value


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Reset environment variables before each test."""
    for key, value in TEST_ENV.items():
        monkeypatch.setenv(key, value)


def make_document(
    doc_id: str,
    title: str,
    content: str,
    category: Category = Category.IMPLEMENTATION,
    tags: tuple[str, ...] = (),
) -> Document:
    return Document(
        id=doc_id,
        title=title,
        content=content,
        category=category,
        tags=tags,
        source=f"data/{doc_id}.md",
    )


@pytest.fixture
def document_factory() -> Callable[..., Document]:
    return make_document


@pytest.fixture
def mcp_corpus() -> list[Document]:
    """Small corpus covering every category."""
    return [
        make_document(
            "sse_transport",
            "SSE Transport",
            "Use Server-Sent Events for streaming responses from the MCP server to the client.",
            Category.EXAMPLES,
            ("transport", "sse"),
        ),
        make_document(
            "streamable_http",
            "Streamable HTTP transport",
            "The streamable HTTP transport replaces SSE with a single endpoint that can upgrade to a stream.",
            Category.EXAMPLES,
            ("transport", "http"),
        ),
        make_document(
            "oauth_spec",
            "Authorization",
            "MCP servers implement OAuth 2.1 with PKCE and dynamic client registration.",
            Category.SPECIFICATION,
            ("oauth", "auth"),
        ),
        make_document(
            "claude_web_debug",
            "Claude was unable to connect",
            "Check that the oauth endpoints and the transport are reachable. A 401 means the bearer token is "
            "missing or expired.",
            Category.TROUBLESHOOTING,
            ("oauth", "connection"),
        ),
        make_document(
            "session_headers",
            "Session management",
            "Send the Mcp-Session-Id header on every request after initialization. Session not found errors "
            "mean the server restarted.",
            Category.TROUBLESHOOTING,
            ("session", "headers"),
        ),
        make_document(
            "server_setup",
            "Server setup",
            "Install the SDK, register tools and start the server over stdio.",
            Category.IMPLEMENTATION,
        ),
    ]


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    """Markdown corpus on disk, laid out the way the loader categorizes it."""
    root = tmp_path / "data"
    (root / "spec").mkdir(parents=True)
    (root / "troubleshooting").mkdir()
    (root / "examples").mkdir()
    (root / "guides").mkdir()

    (root / "spec" / "authorization.md").write_text(
        "---\ntitle: Authorization\ntags: [oauth, pkce]\n---\nMCP uses OAuth 2.1 with PKCE.\n",
        encoding="utf-8",
    )
    (root / "troubleshooting" / "claude-web.md").write_text(
        "# Claude was unable to connect\n\nVerify the oauth endpoints respond.\n",
        encoding="utf-8",
    )
    (root / "examples" / "sse-server.md").write_text(
        "---\ntags: transport\n---\n# SSE Transport\n\nUse Server-Sent Events for streaming.\n",
        encoding="utf-8",
    )
    (root / "guides" / "setup.md").write_text("Install the SDK and start the server.\n", encoding="utf-8")
    (root / "guides" / "notes.txt").write_text("not markdown", encoding="utf-8")
    return root
