"""Vector Store Port - Domain interface for similarity search over product vectors.

Hexagonal Architecture: ingestion and search depend on this port; pgvector
and in-memory adapters implement it.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

from ..models import ProductMetadata, VectorRecord


class VectorStoreError(Exception):
    """Vector store unavailable or rejected the request"""
    pass


class VectorStorePort(ABC):
    """Port interface for a vector store bound to one collection.

    Key Design Principles:
    - Raw scores are cosine similarity (1 = identical, 0 = unrelated)
    - Neighbours come back best first; ties keep the store's own order
    - Filters are exact-match metadata predicates ANDed together
    - No identity semantics: adding the same product twice stores two rows

    Example Usage:
        store = PgVectorStore(session_factory, collection="documents")
        store.add_records([VectorRecord(content=..., embedding=..., metadata=...)])
        hits = store.similarity_search(query_vector, k=5, filter={"category": "mugs"})
        # [(ProductMetadata(...), 0.91), ...]
    """

    @abstractmethod
    def add_records(self, records: list[VectorRecord]) -> int:
        """Persist vector records.

        Args:
            records: Records to store (vector + metadata)

        Returns:
            int: Number of records written

        Raises:
            VectorStoreError: If the write fails
        """
        pass

    @abstractmethod
    def similarity_search(
        self,
        query_vector: list[float],
        k: int,
        filter: Optional[dict[str, Any]] = None,
    ) -> list[tuple[ProductMetadata, float]]:
        """Return the k nearest neighbours of query_vector.

        Args:
            query_vector: Query embedding
            k: Maximum number of neighbours
            filter: Exact-match metadata predicates (empty/None = no filter)

        Returns:
            List of (metadata, raw_score) best first

        Raises:
            VectorStoreError: If the query fails
        """
        pass
