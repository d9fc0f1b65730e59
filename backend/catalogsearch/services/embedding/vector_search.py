"""Vector Search Service - Semantic product search.

Embeds the query, asks the vector store for nearest neighbours and applies
the relevance scaling / threshold / ordering step.
"""

import logging
import time
from typing import Any, Optional

from ...domain.ai import EmbeddingProviderPort
from ...domain.search import SearchOutcome, SearchResult, VectorStorePort, rank_neighbours
from ...observability.metrics import search_requests_total, search_duration_seconds, search_results_returned

logger = logging.getLogger(__name__)


class SemanticSearchService:
    """Semantic search over the product vector store.

    Holds long-lived provider and store objects; safe to share across
    requests since it keeps no per-call state.

    Example:
        >>> service = SemanticSearchService(OpenAIEmbeddingAdapter(...), PgVectorStore(...))
        >>> outcome = service.search("ceramic mug", limit=5, min_score=0.1)
        >>> if outcome.ok:
        ...     for hit in outcome.results:
        ...         print(f"{hit.name}: {hit.relevance_score}%")
    """

    def __init__(self, embedding_provider: EmbeddingProviderPort, vector_store: VectorStorePort):
        self.embedding_provider = embedding_provider
        self.vector_store = vector_store

    def search(
        self,
        query: str,
        limit: int = 10,
        filter: Optional[dict[str, Any]] = None,
        min_score: float = 0.7,
    ) -> SearchOutcome:
        """Search products by semantic similarity.

        Args:
            query: Free-text query (callers validate non-empty)
            limit: Maximum number of results (positive)
            filter: Exact-match metadata predicates ANDed together
            min_score: Minimum relevance as a fraction 0.0-1.0

        Returns:
            SearchOutcome: ranked results, or the error that prevented them.
            On error results is empty; this method never raises.

        Guarantees (successful outcome):
            - len(results) <= limit
            - results sorted by relevance_score descending
            - every result has relevance_score / 100 >= min_score
        """
        start_time = time.perf_counter()

        try:
            query_embedding = self.embedding_provider.embed_text(query)
            neighbours = self.vector_store.similarity_search(
                query_embedding.embedding,
                k=limit,
                filter=filter or {},
            )
            results = rank_neighbours(neighbours, min_score=min_score, limit=limit)

        except Exception as e:
            logger.error(
                f"Error searching products: {e}",
                extra={"query": query, "limit": limit, "min_score": min_score, "error_type": type(e).__name__},
                exc_info=True,
            )
            search_requests_total.labels(status="error").inc()
            return SearchOutcome.failure(e)

        finally:
            search_duration_seconds.observe(time.perf_counter() - start_time)

        search_requests_total.labels(status="ok" if results else "empty").inc()
        search_results_returned.observe(len(results))
        logger.info(
            f"Search returned {len(results)} result(s)",
            extra={"query": query, "limit": limit, "min_score": min_score, "result_count": len(results)},
        )
        return SearchOutcome(results=results)


def search_products(
    service: SemanticSearchService,
    query: str,
    limit: int = 10,
    filter: Optional[dict[str, Any]] = None,
    min_score: float = 0.7,
) -> list[SearchResult]:
    """Search and return only the results list (empty on failure).

    For callers that treat "no matches" and "search unavailable" alike,
    such as the chat tool.
    """
    return service.search(query, limit=limit, filter=filter, min_score=min_score).results
