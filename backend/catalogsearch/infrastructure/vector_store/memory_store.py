"""In-memory vector store for local development and tests.

Same contract as the pgvector store (cosine similarity, exact-match filters,
duplicates allowed) without a database. Contents are lost on restart.
"""

import math
import threading
from typing import Any, Optional

from ...domain.search import ProductMetadata, VectorRecord, VectorStorePort, VectorStoreError


def cosine_similarity(a: list[float], b: list[float]) -> float:
    """Cosine similarity of two equal-length vectors (0.0 if either is all zeros)."""
    if len(a) != len(b):
        raise VectorStoreError(f"Dimension mismatch: {len(a)} != {len(b)}")

    dot = sum(x * y for x, y in zip(a, b))
    norm_a = math.sqrt(sum(x * x for x in a))
    norm_b = math.sqrt(sum(y * y for y in b))
    if norm_a == 0 or norm_b == 0:
        return 0.0
    return dot / (norm_a * norm_b)


class InMemoryVectorStore(VectorStorePort):
    """List-backed VectorStorePort with brute-force cosine search."""

    def __init__(self, collection: str = "documents"):
        self.collection = collection
        self._records: list[VectorRecord] = []
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._records)

    def add_records(self, records: list[VectorRecord]) -> int:
        with self._lock:
            self._records.extend(records)
        return len(records)

    def similarity_search(
        self,
        query_vector: list[float],
        k: int,
        filter: Optional[dict[str, Any]] = None,
    ) -> list[tuple[ProductMetadata, float]]:
        with self._lock:
            records = list(self._records)

        scored = []
        for record in records:
            stored = record.metadata.to_dict()
            if filter and any(stored.get(key) != value for key, value in filter.items()):
                continue
            scored.append((record.metadata, cosine_similarity(query_vector, record.embedding)))

        # Stable: equal similarities keep insertion order
        scored.sort(key=lambda item: item[1], reverse=True)
        return scored[:k]
