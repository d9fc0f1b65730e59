"""Embedding provider port.

Ingestion embeds product text blobs and search embeds the raw query with the
same provider, so both sides of the cosine comparison come from one model.
Vectors written with one model must never be compared with another's.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass
class EmbeddingResult:
    """One embedded text.

    Attributes:
        embedding: The vector (1536 floats for text-embedding-3-small)
        model: Model that produced it
        dimension: len(embedding), kept for schema checks against Vector(N)
        tokens: Tokens billed for this text (batch totals are split evenly)
    """
    embedding: list[float]
    model: str
    dimension: int
    tokens: int


class EmbeddingProviderPort(ABC):
    """Turns text into vectors.

    Adapters map every provider failure onto the EmbeddingError hierarchy
    below; callers never see SDK exceptions.
    """

    @abstractmethod
    def embed_text(self, text: str) -> EmbeddingResult:
        """Embed a single text, typically a search query.

        Raises:
            ValueError: blank text
            EmbeddingError: any provider failure
        """

    @abstractmethod
    def batch_embed_texts(self, texts: list[str]) -> list[EmbeddingResult]:
        """Embed several texts in one request, results in input order.

        All or nothing: a failure for one text fails the whole batch.

        Raises:
            ValueError: empty list or a blank text
            EmbeddingError: any provider failure
        """


class EmbeddingError(Exception):
    """Embedding call failed"""


class EmbeddingTimeoutError(EmbeddingError):
    pass


class EmbeddingRateLimitError(EmbeddingError):
    pass


class EmbeddingAuthError(EmbeddingError):
    """Missing or rejected API key"""


class EmbeddingServiceError(EmbeddingError):
    """Provider returned an API error (5xx, bad request, ...)"""


class EmbeddingInvalidResponseError(EmbeddingError):
    """Response did not contain one vector per input"""
