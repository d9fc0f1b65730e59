"""Vector store adapters"""

from .pgvector_store import PgVectorStore
from .memory_store import InMemoryVectorStore, cosine_similarity

__all__ = [
    "PgVectorStore",
    "InMemoryVectorStore",
    "cosine_similarity",
]
