"""Service layer - the query/result contract exposed to tools and callers.

- initialize(): build the index once from parsed documents
- search(): validate input, query the index, shape results as SearchHits

Input validation happens here, before the index is touched: unknown
categories and overlong queries raise QueryRejected. A blank query is not an
error; it simply matches nothing.
"""

from collections.abc import Iterable
import logging

from mcp_docs_server.domain.categories import parse_category
from mcp_docs_server.domain.model import Category, Document, FieldWeights, SearchHit
from mcp_docs_server.errors import QueryRejected
from mcp_docs_server.observability.metrics import INDEX_DOC_COUNT, SEARCH_LATENCY, track_latency
from mcp_docs_server.observability.tracing import create_span
from mcp_docs_server.search.fuzzy import DEFAULT_THRESHOLD
from mcp_docs_server.search.highlights import DEFAULT_CONTEXT_RADIUS
from mcp_docs_server.search.index import DocumentIndex, SearchResult
from mcp_docs_server.search.scorer import ScoreCombination


logger = logging.getLogger(__name__)

DEFAULT_MAX_QUERY_LENGTH = 256


def initialize(
    documents: Iterable[Document],
    weights: FieldWeights | None = None,
    *,
    threshold: float = DEFAULT_THRESHOLD,
    max_score: float = 1.0,
    combination: ScoreCombination = "product",
    context_radius: int = DEFAULT_CONTEXT_RADIUS,
) -> DocumentIndex:
    """Build the search index once.

    Args:
        documents: Parsed corpus, in the order ties should be broken.
        weights: Field weights (defaults to FieldWeights()).
        threshold: Per-field match threshold.
        max_score: Combined score rejection threshold.
        combination: "product" or "mean".
        context_radius: Highlight context characters.

    Returns:
        Immutable DocumentIndex ready for concurrent queries.
    """
    with create_span("search.index.build") as span:
        index = DocumentIndex.build(
            documents,
            weights,
            threshold,
            max_score=max_score,
            combination=combination,
            context_radius=context_radius,
        )
        span.set_attribute("index.document_count", len(index))
    INDEX_DOC_COUNT.set(len(index))
    logger.info("Search index ready with %d documents", len(index))
    return index


def normalize_query(query: str, max_length: int = DEFAULT_MAX_QUERY_LENGTH) -> str:
    """Strip a query and enforce the length limit.

    Raises:
        QueryRejected: If the query is not a string or is too long.
    """
    if not isinstance(query, str):
        raise QueryRejected(f"Query must be a string, got {type(query).__name__}")
    text = query.strip()
    if len(text) > max_length:
        raise QueryRejected(f"Query is {len(text)} characters long; the limit is {max_length}")
    return text


def query_index(
    index: DocumentIndex | None,
    query: str,
    category: str | Category | None = None,
    *,
    max_query_length: int = DEFAULT_MAX_QUERY_LENGTH,
) -> list[SearchResult]:
    """Validate input and return full SearchResults (documents included)."""
    resolved = parse_category(category)
    text = normalize_query(query, max_query_length)
    if index is None or not text:
        return []

    category_label = resolved.value if resolved else "all"
    with (
        track_latency(SEARCH_LATENCY, category=category_label),
        create_span(
            "search.query",
            attributes={"search.query": text[:100], "search.category": category_label},
        ) as span,
    ):
        results = index.query(text, resolved)
        span.set_attribute("search.result_count", len(results))

    logger.debug("Query '%s' (category=%s) matched %d documents", text[:50], category_label, len(results))
    return results


def to_hit(result: SearchResult) -> SearchHit:
    document = result.document
    return SearchHit(
        title=document.title,
        category=document.category,
        source=document.source,
        score=result.score,
        highlights=list(result.highlights),
    )


def search(
    index: DocumentIndex | None,
    query: str,
    category: str | Category | None = None,
    *,
    max_query_length: int = DEFAULT_MAX_QUERY_LENGTH,
) -> list[SearchHit]:
    """Search the index; the sole query entry point for callers.

    Returns:
        Hits ordered best first (ascending score). Empty when nothing matches.

    Raises:
        QueryRejected: Unknown category or overlong query.
    """
    return [to_hit(result) for result in query_index(index, query, category, max_query_length=max_query_length)]
