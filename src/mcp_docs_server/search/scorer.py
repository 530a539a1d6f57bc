"""Weighted multi-field scoring.

Each searchable field of a document is matched independently and the
per-field scores are combined with the configured field weights. Fields that
do not match contribute nothing; a document with no matching field is not a
result at all.

Two combination strategies are available:

- product (default): prod(max(score, EPSILON) ** weight). Since every score
  is in [0, 1], a higher weight or an additional matching field always lowers
  (improves) the combined score.
- mean: sum(score * weight) / sum(weight) over the matched fields.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Literal

from mcp_docs_server.domain.model import Document, FieldWeights
from mcp_docs_server.search.fuzzy import Matcher


# Stand-in for an exact (0.0) field score so it still carries its weight
EPSILON = 2.220446049250313e-16

ScoreCombination = Literal["product", "mean"]


@dataclass(frozen=True, slots=True)
class FieldMatch:
    """Match of the query inside one field of a document."""

    field: str
    value: str
    score: float
    weight: float
    ranges: tuple[tuple[int, int], ...]


@dataclass(frozen=True, slots=True)
class DocumentScore:
    """Combined score plus the per-field matches it was computed from."""

    score: float
    field_matches: tuple[FieldMatch, ...]


def _clamp(value: float) -> float:
    return min(max(value, 0.0), 1.0)


def weighted_product(matches: Sequence[FieldMatch]) -> float:
    total = 1.0
    for match in matches:
        total *= max(match.score, EPSILON) ** match.weight
    return _clamp(total)


def weighted_mean(matches: Sequence[FieldMatch]) -> float:
    weight_sum = sum(match.weight for match in matches)
    if weight_sum <= 0:
        return 1.0
    return _clamp(sum(match.score * match.weight for match in matches) / weight_sum)


COMBINATIONS: dict[str, Callable[[Sequence[FieldMatch]], float]] = {
    "product": weighted_product,
    "mean": weighted_mean,
}


def score_document(
    query: str,
    document: Document,
    weights: FieldWeights,
    matcher: Matcher,
    *,
    max_score: float = 1.0,
    combination: ScoreCombination = "product",
) -> DocumentScore | None:
    """Score one document against a query.

    Args:
        query: Raw query text.
        document: Document to score.
        weights: Field weight configuration.
        matcher: Approximate matcher applied to every field.
        max_score: Combined scores above this are rejected.
        combination: "product" or "mean" (see module docstring).

    Returns:
        DocumentScore, or None when no field matches or the combined score
        exceeds max_score.
    """
    combine = COMBINATIONS[combination]

    matches: list[FieldMatch] = []
    for field, weight in weights.items():
        value = document.field_value(field)
        result = matcher.match(query, value)
        if result is None:
            continue
        matches.append(
            FieldMatch(field=field, value=value, score=result.score, weight=weight, ranges=result.ranges)
        )

    if not matches:
        return None

    score = combine(matches)
    if score > max_score:
        return None
    return DocumentScore(score=score, field_matches=tuple(matches))
