"""Relevance scoring for semantic search hits.

Scoring formula:
- relevance_score = round_half_up(similarity * 100)
- keep hit iff relevance_score / 100 >= min_score
- order by relevance_score descending, ties in vector-store order
- at most `limit` hits
"""

import math
from typing import Iterable, Optional

from .models import ProductMetadata, SearchResult


def to_relevance_score(similarity: float) -> int:
    """Rescale a raw cosine similarity to an integer percentage.

    Rounds half up (0.125 -> 13, 0.005 -> 1), not banker's rounding.
    This is a linear rescale, not a calibrated probability.

    Args:
        similarity: Raw similarity, nominally in [0, 1]

    Returns:
        int: Relevance score, nominally 0-100
    """
    return int(math.floor(similarity * 100 + 0.5))


def build_search_result(metadata: ProductMetadata, similarity: float) -> SearchResult:
    """Turn one vector-store neighbour into a SearchResult."""
    return SearchResult(
        id=metadata.id,
        name=metadata.name,
        description=metadata.description,
        image_url=metadata.image_url,
        relevance_score=to_relevance_score(similarity),
        similarity=similarity,
        popularity=metadata.popularity,
        rating=metadata.rating,
    )


def rank_neighbours(
    neighbours: Iterable[tuple[ProductMetadata, float]],
    min_score: float,
    limit: Optional[int] = None,
) -> list[SearchResult]:
    """Scale, threshold and order vector-store neighbours.

    Args:
        neighbours: (metadata, raw similarity) pairs in store order
        min_score: Minimum relevance as a fraction 0.0-1.0
        limit: Maximum number of results (None = no cap)

    Returns:
        List of SearchResult sorted by relevance_score descending

    Example:
        >>> rank_neighbours([(mug, 0.82), (plate, 0.05)], min_score=0.1)
        [SearchResult(name='Blue Ceramic Mug', relevance_score=82, ...)]
    """
    results = [build_search_result(metadata, similarity) for metadata, similarity in neighbours]
    results = [r for r in results if r.relevance_score / 100 >= min_score]

    # sorted() is stable, so equal scores keep store order
    results = sorted(results, key=lambda r: r.relevance_score, reverse=True)

    if limit is not None:
        results = results[:limit]
    return results


def relevance_percentage(score: int) -> str:
    """Display string for a relevance score, e.g. '82%'."""
    return f"{score}%"


def with_debug(result: SearchResult) -> dict:
    """Serialize a result with the debug block the storefront and chat show."""
    data = result.to_dict()
    data["debug"] = {"relevancePercentage": relevance_percentage(result.relevance_score)}
    return data
