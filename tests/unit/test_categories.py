"""Unit tests for path-based categorization and category parsing."""

import pytest

from mcp_docs_server.domain.categories import DEFAULT_CATEGORY, categorize_path, parse_category
from mcp_docs_server.domain.model import Category
from mcp_docs_server.errors import QueryRejected


pytestmark = pytest.mark.unit


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("spec/authorization.md", Category.SPECIFICATION),
        ("docs/Authorization-Flow.md", Category.SPECIFICATION),
        ("specification/lifecycle.md", Category.SPECIFICATION),
        ("troubleshooting/claude-web.md", Category.TROUBLESHOOTING),
        ("guides/debugging.md", Category.TROUBLESHOOTING),
        ("examples/sse-server.md", Category.EXAMPLES),
        ("deploy/cloudflare-worker.md", Category.EXAMPLES),
        ("simplescraper/oauth.md", Category.EXAMPLES),
        ("guides/setup.md", Category.IMPLEMENTATION),
        ("", DEFAULT_CATEGORY),
    ],
)
def test_categorize_path(path, expected) -> None:
    assert categorize_path(path) == expected


def test_first_matching_rule_wins() -> None:
    # Matches both the specification and the examples rules
    assert categorize_path("examples/spec-compliance.md") == Category.SPECIFICATION


def test_troubleshooting_before_examples() -> None:
    assert categorize_path("examples/debug-session.md") == Category.TROUBLESHOOTING


def test_parse_category_accepts_values_and_members() -> None:
    assert parse_category(None) is None
    assert parse_category(Category.EXAMPLES) is Category.EXAMPLES
    assert parse_category("troubleshooting") is Category.TROUBLESHOOTING
    assert parse_category(" Specification ") is Category.SPECIFICATION


def test_parse_category_rejects_unknown_value() -> None:
    with pytest.raises(QueryRejected, match="Unknown category 'recipes'"):
        parse_category("recipes")


def test_query_rejected_is_value_error() -> None:
    with pytest.raises(ValueError):
        parse_category("recipes")
