"""Embeddings from the OpenAI API (text-embedding-3-small, 1536 dimensions).

SDK exceptions are mapped onto the EmbeddingError hierarchy and every call
is counted in the ai_* metrics, labelled query or product.
"""

import time
from typing import Optional

from openai import OpenAI, APIError, APITimeoutError, RateLimitError, AuthenticationError

from ...domain.ai import (
    AICallType,
    EmbeddingProviderPort,
    EmbeddingResult,
    EmbeddingError,
    EmbeddingTimeoutError,
    EmbeddingRateLimitError,
    EmbeddingAuthError,
    EmbeddingServiceError,
    EmbeddingInvalidResponseError,
)
from ...observability.metrics import ai_calls_total, ai_latency_ms, ai_tokens_total

# OpenAI limit on inputs per embeddings request
MAX_BATCH_SIZE = 2048


class OpenAIEmbeddingAdapter(EmbeddingProviderPort):
    """One OpenAI client per adapter; the app keeps one adapter per process.

    Inputs above the model limit (8191 tokens) come back as an API error,
    which surfaces as EmbeddingServiceError.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = "text-embedding-3-small",
        timeout: int = 30,
        client: Optional[OpenAI] = None,
    ):
        """`client` overrides api_key and timeout (tests, shared clients).

        A missing key is not an error here; each call then fails with
        EmbeddingAuthError so that callers see it as a provider failure.
        """
        self.model = model
        self.timeout = timeout
        if client is None and api_key:
            client = OpenAI(api_key=api_key, timeout=self.timeout)
        self.client = client

    def embed_text(self, text: str) -> EmbeddingResult:
        """Embed a search query."""
        if not text or not text.strip():
            raise ValueError("Text cannot be empty")

        return self._create([text], AICallType.EMBEDDING_QUERY)[0]

    def batch_embed_texts(self, texts: list[str]) -> list[EmbeddingResult]:
        """Embed product texts in one request (at most MAX_BATCH_SIZE).

        The API reports only a total token count, split evenly across results.
        """
        if not texts:
            raise ValueError("Texts list cannot be empty")

        if any(not t or not t.strip() for t in texts):
            raise ValueError("All texts must be non-empty")

        if len(texts) > MAX_BATCH_SIZE:
            raise ValueError(f"Batch size exceeds OpenAI limit of {MAX_BATCH_SIZE} texts")

        return self._create(texts, AICallType.EMBEDDING_PRODUCT)

    def _create(self, texts: list[str], call_type: AICallType) -> list[EmbeddingResult]:
        start_time = time.perf_counter()
        status = "error"

        try:
            if self.client is None:
                raise EmbeddingAuthError("OPENAI_API_KEY not provided")

            response = self.client.embeddings.create(
                model=self.model,
                input=texts if len(texts) > 1 else texts[0],
            )

            if not response.data or len(response.data) != len(texts):
                raise EmbeddingInvalidResponseError(
                    f"Expected {len(texts)} embeddings, got {len(response.data) if response.data else 0}"
                )

            # Sort by index to ensure correct order
            sorted_data = sorted(response.data, key=lambda x: x.index)

            total_tokens = response.usage.total_tokens if response.usage else 0
            tokens_per_text = total_tokens // len(texts)
            ai_tokens_total.labels(call_type=call_type.value, provider="openai").inc(total_tokens)

            results = [
                EmbeddingResult(
                    embedding=list(data.embedding),
                    model=self.model,
                    dimension=len(data.embedding),
                    tokens=tokens_per_text,
                )
                for data in sorted_data
            ]
            status = "success"
            return results

        except EmbeddingError:
            raise
        except AuthenticationError as e:
            raise EmbeddingAuthError(f"OpenAI authentication failed: {e}") from e
        except RateLimitError as e:
            raise EmbeddingRateLimitError(f"OpenAI rate limit exceeded: {e}") from e
        except APITimeoutError as e:
            raise EmbeddingTimeoutError(f"OpenAI request timed out: {e}") from e
        except APIError as e:
            raise EmbeddingServiceError(f"OpenAI API error: {e}") from e
        except Exception as e:
            raise EmbeddingInvalidResponseError(f"Unexpected error from OpenAI: {e}") from e
        finally:
            latency_ms = (time.perf_counter() - start_time) * 1000
            ai_calls_total.labels(call_type=call_type.value, provider="openai", status=status).inc()
            ai_latency_ms.labels(call_type=call_type.value, provider="openai").observe(latency_ms)
