"""Category assignment from a document's origin path.

Rules are evaluated in order and the first rule with a keyword contained in
the (lowercased) path wins. Paths matching no rule are implementation docs.
"""

from mcp_docs_server.domain.model import Category
from mcp_docs_server.errors import QueryRejected


CATEGORY_RULES: tuple[tuple[tuple[str, ...], Category], ...] = (
    (("authorization", "spec"), Category.SPECIFICATION),
    (("troubleshoot", "debug"), Category.TROUBLESHOOTING),
    (("example", "cloudflare", "simplescraper"), Category.EXAMPLES),
)

DEFAULT_CATEGORY = Category.IMPLEMENTATION


def categorize_path(path: str) -> Category:
    """Assign a category to a document from its path.

    Examples:
        >>> categorize_path("guides/troubleshooting/claude-web.md")
        <Category.TROUBLESHOOTING: 'troubleshooting'>
        >>> categorize_path("server/setup.md")
        <Category.IMPLEMENTATION: 'implementation'>
    """
    lowered = path.lower()
    for keywords, category in CATEGORY_RULES:
        if any(keyword in lowered for keyword in keywords):
            return category
    return DEFAULT_CATEGORY


def parse_category(value: str | Category | None) -> Category | None:
    """Validate a caller-supplied category filter.

    Raises:
        QueryRejected: If the value is not one of the known categories.
    """
    if value is None or isinstance(value, Category):
        return value
    try:
        return Category(value.strip().lower())
    except ValueError:
        allowed = ", ".join(c.value for c in Category)
        raise QueryRejected(f"Unknown category '{value}'. Expected one of: {allowed}") from None
