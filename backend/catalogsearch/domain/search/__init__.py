"""Search domain layer - models, scoring and the vector store port"""

from .models import (
    ProductMetadata,
    ProductInput,
    VectorRecord,
    SearchResult,
    SearchError,
    SearchOutcome,
    IngestionResult,
)
from .ports import VectorStorePort, VectorStoreError
from .scoring import to_relevance_score, rank_neighbours, relevance_percentage, with_debug

__all__ = [
    "ProductMetadata",
    "ProductInput",
    "VectorRecord",
    "SearchResult",
    "SearchError",
    "SearchOutcome",
    "IngestionResult",
    "VectorStorePort",
    "VectorStoreError",
    "to_relevance_score",
    "rank_neighbours",
    "relevance_percentage",
    "with_debug",
]
