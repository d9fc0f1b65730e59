"""AI domain layer - Ports and domain models for embedding and chat providers"""

from .ports import (
    EmbeddingProviderPort,
    EmbeddingResult,
    EmbeddingError,
    EmbeddingTimeoutError,
    EmbeddingRateLimitError,
    EmbeddingAuthError,
    EmbeddingServiceError,
    EmbeddingInvalidResponseError,
    ChatProviderPort,
    ChatCompletion,
    ToolCall,
    ChatError,
    ChatTimeoutError,
    ChatRateLimitError,
    ChatAuthError,
    ChatServiceError,
)
from .models import AICallType

__all__ = [
    "EmbeddingProviderPort",
    "EmbeddingResult",
    "EmbeddingError",
    "EmbeddingTimeoutError",
    "EmbeddingRateLimitError",
    "EmbeddingAuthError",
    "EmbeddingServiceError",
    "EmbeddingInvalidResponseError",
    "ChatProviderPort",
    "ChatCompletion",
    "ToolCall",
    "ChatError",
    "ChatTimeoutError",
    "ChatRateLimitError",
    "ChatAuthError",
    "ChatServiceError",
    "AICallType",
]
