"""Documentation service - owns the corpus index for the server lifetime.

The service loads the corpus and builds the index once at startup; every
later call reads the same immutable index. Before initialize() runs, all
queries return empty results.
"""

from collections.abc import Callable, Iterable
import logging
from pathlib import Path

from mcp_docs_server.adapters.markdown_loader import load_corpus
from mcp_docs_server.config import Settings
from mcp_docs_server.domain.categories import parse_category
from mcp_docs_server.domain.model import Category, Document, SearchHit
from mcp_docs_server.search.index import DocumentIndex, SearchResult
from mcp_docs_server.service_layer import services


logger = logging.getLogger(__name__)


class DocumentationService:
    """High-level access to the documentation corpus.

    Args:
        settings: Runtime configuration.
        loader: Corpus loader (defaults to the markdown filesystem loader).
    """

    def __init__(
        self,
        settings: Settings,
        loader: Callable[[Path], list[Document]] = load_corpus,
    ) -> None:
        self.settings = settings
        self._loader = loader
        self._index: DocumentIndex | None = None

    @property
    def index(self) -> DocumentIndex | None:
        return self._index

    def initialize(self, documents: Iterable[Document] | None = None) -> DocumentIndex:
        """Load the corpus (unless documents are given) and build the index."""
        if documents is None:
            documents = self._loader(self.settings.resolve_data_dir())

        settings = self.settings
        self._index = services.initialize(
            documents,
            settings.field_weights(),
            threshold=settings.search_threshold,
            max_score=settings.search_max_score,
            combination=settings.search_score_combination,
            context_radius=settings.highlight_context_chars,
        )
        logger.info("Loaded %d documentation sections", len(self._index))
        return self._index

    def search(self, query: str, category: str | Category | None = None) -> list[SearchResult]:
        """Ranked results including the matched documents."""
        return services.query_index(
            self._index,
            query,
            category,
            max_query_length=self.settings.max_query_length,
        )

    def search_hits(self, query: str, category: str | Category | None = None) -> list[SearchHit]:
        """Ranked results shaped for the query/result contract."""
        return [services.to_hit(result) for result in self.search(query, category)]

    def get_by_category(self, category: str | Category) -> list[Document]:
        resolved = parse_category(category)
        if self._index is None or resolved is None:
            return []
        return self._index.by_category(resolved)

    def get_by_id(self, doc_id: str) -> Document | None:
        if self._index is None:
            return None
        return self._index.by_id(doc_id)

    def get_all_sections(self) -> list[Document]:
        if self._index is None:
            return []
        return self._index.documents
