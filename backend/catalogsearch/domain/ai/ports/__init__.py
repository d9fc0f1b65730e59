"""AI Port Interfaces"""

from .embedding_provider_port import (
    EmbeddingProviderPort,
    EmbeddingResult,
    EmbeddingError,
    EmbeddingTimeoutError,
    EmbeddingRateLimitError,
    EmbeddingAuthError,
    EmbeddingServiceError,
    EmbeddingInvalidResponseError,
)
from .chat_provider_port import (
    ChatProviderPort,
    ChatCompletion,
    ToolCall,
    ChatError,
    ChatTimeoutError,
    ChatRateLimitError,
    ChatAuthError,
    ChatServiceError,
)

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
]
