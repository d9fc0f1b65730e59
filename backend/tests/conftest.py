"""Pytest fixtures for catalog search tests.

Provides reusable test fixtures for:
- Deterministic fake embedding provider (no network)
- In-memory vector store
- SQLite database session for the product table
- FastAPI test client with all external collaborators overridden

Usage:
    def test_search(client, ingest):
        ingest("Blue Ceramic Mug", "A sturdy hand-glazed mug")
        response = client.get("/api/search", params={"q": "ceramic mug"})
        assert response.status_code == 200
"""

import hashlib
import math
import os
import re
from typing import Generator, Optional

# Set environment variables BEFORE any imports to ensure they take effect
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("OPENAI_API_KEY", "test-openai-key")
os.environ.setdefault("VECTOR_STORE_BACKEND", "memory")
os.environ.setdefault("LOG_JSON", "false")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from catalogsearch.database import get_db
from catalogsearch.dependencies import (
    get_embedding_provider,
    get_object_storage,
    get_search_service,
    get_vector_store,
)
from catalogsearch.domain.ai import EmbeddingProviderPort, EmbeddingResult, EmbeddingServiceError
from catalogsearch.domain.search import ProductInput
from catalogsearch.domain.storage import ObjectStoragePort, StoredImage
from catalogsearch.infrastructure.storage import StorageError, generate_image_key
from catalogsearch.infrastructure.vector_store import InMemoryVectorStore
from catalogsearch.models import Base, Product
from catalogsearch.services.embedding import SemanticSearchService, store_product_embeddings


FAKE_DIMENSION = 256


def _tokens(text: str) -> list[str]:
    return re.findall(r"[a-z0-9]+", text.lower())


class FakeEmbeddingProvider(EmbeddingProviderPort):
    """Bag-of-words embedder: each token hashes into one of FAKE_DIMENSION buckets.

    Texts sharing words get a positive cosine similarity; texts with no
    words in common are (barring hash collisions) orthogonal.
    """

    def __init__(self):
        self.calls: list[list[str]] = []

    def _vector(self, text: str) -> list[float]:
        vector = [0.0] * FAKE_DIMENSION
        for token in _tokens(text):
            bucket = int(hashlib.md5(token.encode()).hexdigest(), 16) % FAKE_DIMENSION
            vector[bucket] += 1.0
        norm = math.sqrt(sum(v * v for v in vector)) or 1.0
        return [v / norm for v in vector]

    def _result(self, text: str) -> EmbeddingResult:
        return EmbeddingResult(embedding=self._vector(text), model="fake", dimension=FAKE_DIMENSION, tokens=len(_tokens(text)))

    def embed_text(self, text: str) -> EmbeddingResult:
        if not text or not text.strip():
            raise ValueError("Text cannot be empty")
        self.calls.append([text])
        return self._result(text)

    def batch_embed_texts(self, texts: list[str]) -> list[EmbeddingResult]:
        if not texts:
            raise ValueError("Texts list cannot be empty")
        self.calls.append(list(texts))
        return [self._result(t) for t in texts]


class FixedEmbeddingProvider(EmbeddingProviderPort):
    """Returns preset vectors by exact text (for exact-score tests)."""

    def __init__(self, vectors: dict[str, list[float]]):
        self.vectors = vectors

    def embed_text(self, text: str) -> EmbeddingResult:
        vector = self.vectors[text]
        return EmbeddingResult(embedding=vector, model="fixed", dimension=len(vector), tokens=1)

    def batch_embed_texts(self, texts: list[str]) -> list[EmbeddingResult]:
        return [self.embed_text(t) for t in texts]


class FailingEmbeddingProvider(EmbeddingProviderPort):
    """Every call fails like an unreachable provider."""

    def embed_text(self, text: str) -> EmbeddingResult:
        raise EmbeddingServiceError("OpenAI service error: connection refused")

    def batch_embed_texts(self, texts: list[str]) -> list[EmbeddingResult]:
        raise EmbeddingServiceError("OpenAI service error: connection refused")


@pytest.fixture
def fake_embedder() -> FakeEmbeddingProvider:
    return FakeEmbeddingProvider()


@pytest.fixture
def failing_embedder() -> FailingEmbeddingProvider:
    return FailingEmbeddingProvider()


@pytest.fixture
def vector_store() -> InMemoryVectorStore:
    return InMemoryVectorStore(collection="documents")


@pytest.fixture
def search_service(fake_embedder, vector_store) -> SemanticSearchService:
    return SemanticSearchService(fake_embedder, vector_store)


@pytest.fixture
def ingest(fake_embedder, vector_store):
    """Ingest one product straight into the vector store."""
    counter = {"next_id": 1}

    def _ingest(name: str, description: str, image_url: Optional[str] = None, **attributes):
        product = ProductInput(
            id=counter["next_id"],
            name=name,
            description=description,
            image_url=image_url,
            attributes=attributes,
        )
        counter["next_id"] += 1
        result = store_product_embeddings([product], fake_embedder, vector_store)
        assert result.success, result.error
        return product

    return _ingest


@pytest.fixture(scope="function")
def db_engine():
    """In-memory SQLite engine shared across threads (TestClient runs sync endpoints in a pool)."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    # Only the catalog table; the documents table needs pgvector
    Base.metadata.create_all(bind=engine, tables=[Product.__table__])
    yield engine
    engine.dispose()


@pytest.fixture(scope="function")
def db_session(db_engine) -> Generator[Session, None, None]:
    session = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)()
    try:
        yield session
    finally:
        session.close()


class StubObjectStorage(ObjectStoragePort):
    """Records uploads instead of talking to S3."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.uploads: list[tuple[str, bytes, str]] = []

    async def upload_image(self, file, filename, content_type):
        if self.fail:
            raise StorageError("bucket unavailable")
        content = file.read()
        key = generate_image_key(filename)
        self.uploads.append((key, content, content_type))
        return StoredImage(
            storage_key=key,
            public_url=f"http://images.test/{key}",
            size_bytes=len(content),
            content_type=content_type,
        )

    def public_url(self, storage_key):
        return f"http://images.test/{storage_key}"

    async def file_exists(self, storage_key):
        return any(key == storage_key for key, _, _ in self.uploads)

    def check_bucket(self):
        if self.fail:
            raise StorageError("bucket unavailable")


@pytest.fixture
def object_storage() -> StubObjectStorage:
    return StubObjectStorage()


@pytest.fixture
def failing_object_storage() -> StubObjectStorage:
    return StubObjectStorage(fail=True)


@pytest.fixture
def app_overrides(db_engine, fake_embedder, vector_store, object_storage):
    """Dependency overrides for the app; tests may replace entries before creating the client."""
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)

    def override_get_db():
        db = SessionLocal()
        try:
            yield db
        finally:
            db.close()

    return {
        get_db: override_get_db,
        get_embedding_provider: lambda: fake_embedder,
        get_vector_store: lambda: vector_store,
        get_object_storage: lambda: object_storage,
        get_search_service: lambda: SemanticSearchService(fake_embedder, vector_store),
    }


@pytest.fixture
def client(app_overrides) -> Generator[TestClient, None, None]:
    """Test client with external collaborators replaced by fakes."""
    from catalogsearch.main import app

    app.dependency_overrides.update(app_overrides)
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def fixed_embedder_factory():
    """Build a FixedEmbeddingProvider from a {text: vector} mapping."""
    return FixedEmbeddingProvider
