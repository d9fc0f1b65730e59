"""AI Infrastructure - Adapters for embedding and chat providers.

This module contains concrete implementations of AI domain ports.
"""

from .openai_embeddings import OpenAIEmbeddingAdapter
from .openai_chat import OpenAIChatProvider

__all__ = [
    "OpenAIEmbeddingAdapter",
    "OpenAIChatProvider",
]
