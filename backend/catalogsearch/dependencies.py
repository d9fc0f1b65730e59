"""Global FastAPI dependencies for the search pipeline.

This module provides one long-lived instance per process of:
- get_embedding_provider / get_chat_provider: OpenAI adapters
- get_vector_store: pgvector (or in-memory) store for the configured collection
- get_object_storage: S3/MinIO image storage
- get_search_service, get_tool_registry, get_chat_assistant

Instances are built lazily on first use and cached with lru_cache, the same
way get_settings() is. Tests replace them via app.dependency_overrides.
"""

import logging
from functools import lru_cache

from .chat.assistant import ChatAssistant
from .chat.tools import ToolRegistry, build_search_tool
from .config import get_settings
from .database import get_session_factory
from .domain.ai import ChatProviderPort, EmbeddingProviderPort
from .domain.search import VectorStorePort
from .domain.storage import ObjectStoragePort
from .infrastructure.ai import OpenAIChatProvider, OpenAIEmbeddingAdapter
from .infrastructure.storage import S3StorageAdapter, load_storage_config
from .infrastructure.vector_store import InMemoryVectorStore, PgVectorStore
from .services.embedding import SemanticSearchService

logger = logging.getLogger(__name__)


@lru_cache()
def get_embedding_provider() -> EmbeddingProviderPort:
    settings = get_settings()
    return OpenAIEmbeddingAdapter(
        api_key=settings.OPENAI_API_KEY,
        model=settings.EMBEDDING_MODEL,
        timeout=settings.OPENAI_TIMEOUT_SECONDS,
    )


@lru_cache()
def get_chat_provider() -> ChatProviderPort:
    settings = get_settings()
    return OpenAIChatProvider(
        api_key=settings.OPENAI_API_KEY,
        model=settings.CHAT_MODEL,
        timeout=settings.OPENAI_TIMEOUT_SECONDS,
    )


@lru_cache()
def get_vector_store() -> VectorStorePort:
    """Vector store selected by VECTOR_STORE_BACKEND.

    Raises:
        ValueError: If the backend name is not recognised
    """
    settings = get_settings()
    backend = settings.VECTOR_STORE_BACKEND.lower()

    if backend == "pgvector":
        store: VectorStorePort = PgVectorStore(get_session_factory(), collection=settings.VECTOR_COLLECTION)
    elif backend == "memory":
        store = InMemoryVectorStore(collection=settings.VECTOR_COLLECTION)
    else:
        raise ValueError(f"Unknown VECTOR_STORE_BACKEND: {settings.VECTOR_STORE_BACKEND}")

    logger.info(f"Initialized vector store: backend={backend}, collection={settings.VECTOR_COLLECTION}")
    return store


@lru_cache()
def get_object_storage() -> ObjectStoragePort:
    config = load_storage_config(get_settings())
    return S3StorageAdapter(**config.adapter_kwargs())


@lru_cache()
def get_search_service() -> SemanticSearchService:
    return SemanticSearchService(get_embedding_provider(), get_vector_store())


@lru_cache()
def get_tool_registry() -> ToolRegistry:
    return ToolRegistry([build_search_tool(get_search_service())])


@lru_cache()
def get_chat_assistant() -> ChatAssistant:
    return ChatAssistant(
        chat_provider=get_chat_provider(),
        registry=get_tool_registry(),
        max_steps=get_settings().CHAT_MAX_STEPS,
    )
