"""Embedding Services - Product embedding ingestion and semantic search.

This module provides services for:
- Embedding text and metadata generation from product data
- Embedding ingestion into the vector store
- Semantic search with relevance scoring
"""

from .text_generator import generate_product_embedding_text, build_product_metadata
from .ingestion import store_product_embeddings
from .vector_search import SemanticSearchService, search_products

__all__ = [
    "generate_product_embedding_text",
    "build_product_metadata",
    "store_product_embeddings",
    "SemanticSearchService",
    "search_products",
]
