"""Domain layer - documents, categories and field weights.

No I/O lives here: documents are built by the corpus loader and handed
to the search index as immutable values.
"""

from mcp_docs_server.domain.categories import CATEGORY_RULES, categorize_path, parse_category
from mcp_docs_server.domain.model import Category, Document, FieldWeights, SearchHit


__all__ = [
    "CATEGORY_RULES",
    "Category",
    "Document",
    "FieldWeights",
    "SearchHit",
    "categorize_path",
    "parse_category",
]
