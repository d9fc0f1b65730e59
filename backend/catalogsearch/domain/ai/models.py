"""AI domain models and enums"""

from enum import Enum


class AICallType(str, Enum):
    """AI call types for metrics labels."""
    EMBEDDING_PRODUCT = "EMBEDDING_PRODUCT"
    EMBEDDING_QUERY = "EMBEDDING_QUERY"
    CHAT_COMPLETION = "CHAT_COMPLETION"
