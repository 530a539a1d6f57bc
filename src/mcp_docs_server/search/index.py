"""In-memory fuzzy search index over the documentation corpus.

The index is built once and never mutated afterwards, so any number of
queries may run concurrently against it without locking. Rebuilding the
corpus means building a new index and swapping the reference.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
import logging

from mcp_docs_server.domain.model import Category, Document, FieldWeights
from mcp_docs_server.search.fuzzy import DEFAULT_THRESHOLD, ApproximateMatcher, Matcher
from mcp_docs_server.search.highlights import DEFAULT_CONTEXT_RADIUS, extract_highlights
from mcp_docs_server.search.scorer import FieldMatch, ScoreCombination, score_document


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SearchResult:
    """A ranked document for one query."""

    document: Document
    score: float
    highlights: tuple[str, ...] = ()
    field_matches: tuple[FieldMatch, ...] = field(default=(), repr=False)


class DocumentStore:
    """Ordered, id-unique collection of documents."""

    def __init__(self, documents: Iterable[Document] = ()) -> None:
        self._documents: list[Document] = []
        self._by_id: dict[str, Document] = {}
        for document in documents:
            if document.id in self._by_id:
                logger.warning("Skipping duplicate document id %s (source=%s)", document.id, document.source)
                continue
            self._documents.append(document)
            self._by_id[document.id] = document

    def __len__(self) -> int:
        return len(self._documents)

    def __iter__(self):
        return iter(self._documents)

    def get(self, doc_id: str) -> Document | None:
        return self._by_id.get(doc_id)

    def by_category(self, category: Category) -> list[Document]:
        return [document for document in self._documents if document.category == category]

    def all(self) -> list[Document]:
        return list(self._documents)


class DocumentIndex:
    """Fuzzy, weighted, category-aware search over a DocumentStore.

    Use DocumentIndex.build() to construct one.
    """

    def __init__(
        self,
        store: DocumentStore,
        weights: FieldWeights,
        matcher: Matcher,
        *,
        max_score: float = 1.0,
        combination: ScoreCombination = "product",
        context_radius: int = DEFAULT_CONTEXT_RADIUS,
    ) -> None:
        self._store = store
        self._weights = weights
        self._matcher = matcher
        self._max_score = max_score
        self._combination = combination
        self._context_radius = context_radius

    @classmethod
    def build(
        cls,
        documents: Iterable[Document],
        weights: FieldWeights | None = None,
        threshold: float = DEFAULT_THRESHOLD,
        *,
        max_score: float = 1.0,
        combination: ScoreCombination = "product",
        context_radius: int = DEFAULT_CONTEXT_RADIUS,
        matcher: Matcher | None = None,
    ) -> DocumentIndex:
        """Build an index from parsed documents.

        Args:
            documents: Corpus in insertion order; later duplicates are dropped.
            weights: Field weights (defaults to FieldWeights()).
            threshold: Per-field match threshold for the default matcher.
            max_score: Combined score rejection threshold.
            combination: "product" or "mean" score combination.
            context_radius: Highlight context on each side of a match.
            matcher: Custom matcher; overrides threshold when given.
        """
        store = DocumentStore(documents)
        index = cls(
            store,
            weights or FieldWeights(),
            matcher or ApproximateMatcher(threshold),
            max_score=max_score,
            combination=combination,
            context_radius=context_radius,
        )
        logger.debug("Built search index with %d documents", len(store))
        return index

    def __len__(self) -> int:
        return len(self._store)

    @property
    def weights(self) -> FieldWeights:
        return self._weights

    @property
    def documents(self) -> list[Document]:
        return self._store.all()

    def query(self, text: str, category: Category | None = None) -> list[SearchResult]:
        """Rank every matching document, best (lowest score) first.

        Args:
            text: Query text; an empty query matches nothing.
            category: Optional category filter.

        Returns:
            All matching documents. Equal scores keep corpus order.
        """
        results: list[SearchResult] = []
        for document in self._store:
            if category is not None and document.category != category:
                continue
            scored = score_document(
                text,
                document,
                self._weights,
                self._matcher,
                max_score=self._max_score,
                combination=self._combination,
            )
            if scored is None:
                continue
            results.append(
                SearchResult(
                    document=document,
                    score=scored.score,
                    highlights=tuple(extract_highlights(scored.field_matches, self._context_radius)),
                    field_matches=scored.field_matches,
                )
            )

        # list.sort is stable: ties stay in insertion order
        results.sort(key=lambda result: result.score)
        return results

    def by_category(self, category: Category) -> list[Document]:
        return self._store.by_category(category)

    def by_id(self, doc_id: str) -> Document | None:
        return self._store.get(doc_id)
