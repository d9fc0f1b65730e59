"""Unit tests for the vector store adapters.

The in-memory store is exercised directly. The pgvector store is checked by
compiling its k-NN statement for PostgreSQL and by driving it with a mocked
session, since the tests do not run against a pgvector database.
"""

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from sqlalchemy.dialects import postgresql
from sqlalchemy.exc import OperationalError

from catalogsearch.domain.search import ProductMetadata, VectorRecord, VectorStoreError
from catalogsearch.infrastructure.vector_store import InMemoryVectorStore, PgVectorStore, cosine_similarity
from catalogsearch.models import ProductEmbedding


def _record(product_id: int, vector: list[float], **extra) -> VectorRecord:
    meta = ProductMetadata(id=product_id, name=f"P{product_id}", description="d", extra=extra)
    return VectorRecord(content=f"P{product_id} d", embedding=vector, metadata=meta)


class TestCosineSimilarity:

    def test_identical_vectors(self):
        assert cosine_similarity([1.0, 2.0], [1.0, 2.0]) == pytest.approx(1.0)

    def test_orthogonal_vectors(self):
        assert cosine_similarity([1.0, 0.0], [0.0, 3.0]) == 0.0

    def test_zero_vector(self):
        assert cosine_similarity([0.0, 0.0], [1.0, 0.0]) == 0.0

    def test_dimension_mismatch(self):
        with pytest.raises(VectorStoreError, match="Dimension mismatch"):
            cosine_similarity([1.0], [1.0, 0.0])


class TestInMemoryVectorStore:

    def test_add_records_returns_count(self):
        store = InMemoryVectorStore()

        assert store.add_records([_record(1, [1.0, 0.0]), _record(2, [0.0, 1.0])]) == 2
        assert len(store) == 2

    def test_nearest_first_and_k_respected(self):
        store = InMemoryVectorStore()
        store.add_records([
            _record(1, [0.0, 1.0]),
            _record(2, [1.0, 0.0]),
            _record(3, [0.6, 0.8]),
        ])

        hits = store.similarity_search([1.0, 0.0], k=2)

        assert [meta.id for meta, _ in hits] == [2, 3]
        assert hits[0][1] == pytest.approx(1.0)
        assert hits[1][1] == pytest.approx(0.6)

    def test_filter_is_exact_match_on_metadata(self):
        store = InMemoryVectorStore()
        store.add_records([
            _record(1, [1.0, 0.0], category="kitchen"),
            _record(2, [1.0, 0.0], category="office"),
            _record(3, [1.0, 0.0]),
        ])

        hits = store.similarity_search([1.0, 0.0], k=10, filter={"category": "office"})

        assert [meta.id for meta, _ in hits] == [2]

    def test_duplicates_are_kept(self):
        store = InMemoryVectorStore()
        store.add_records([_record(1, [1.0, 0.0])])
        store.add_records([_record(1, [1.0, 0.0])])

        hits = store.similarity_search([1.0, 0.0], k=10)

        assert [meta.id for meta, _ in hits] == [1, 1]


class TestPgVectorStoreQuery:
    """Compiled SQL of the k-NN statement"""

    def _compile(self, query) -> str:
        return str(query.compile(dialect=postgresql.dialect()))

    def test_orders_by_cosine_distance_within_collection(self):
        store = PgVectorStore(session_factory=MagicMock(), collection="documents")

        sql = self._compile(store.build_search_query([0.1] * 1536, k=5))

        assert "<=>" in sql
        assert "documents.collection" in sql
        assert "ORDER BY" in sql
        assert "LIMIT" in sql
        assert "@>" not in sql

    def test_filter_uses_jsonb_containment(self):
        store = PgVectorStore(session_factory=MagicMock())

        sql = self._compile(store.build_search_query([0.1] * 1536, k=5, filter={"category": "kitchen"}))

        assert "@>" in sql

    def test_similarity_column_is_labelled(self):
        store = PgVectorStore(session_factory=MagicMock())

        sql = self._compile(store.build_search_query([0.1] * 1536, k=5))

        assert "AS similarity" in sql


class TestPgVectorStoreSession:
    """Writes and reads through a mocked session"""

    def test_add_records_writes_rows_and_commits(self):
        session = MagicMock()
        store = PgVectorStore(session_factory=lambda: session, collection="documents")

        written = store.add_records([_record(4, [0.5] * 1536, category="kitchen")])

        assert written == 1
        row = session.add.call_args[0][0]
        assert isinstance(row, ProductEmbedding)
        assert row.collection == "documents"
        assert row.product_id == 4
        assert row.metadata_json["category"] == "kitchen"
        session.commit.assert_called_once()
        session.close.assert_called_once()

    def test_add_records_wraps_database_errors(self):
        session = MagicMock()
        session.commit.side_effect = OperationalError("INSERT", {}, Exception("connection lost"))
        store = PgVectorStore(session_factory=lambda: session)

        with pytest.raises(VectorStoreError):
            store.add_records([_record(1, [0.5] * 1536)])

        session.rollback.assert_called_once()

    def test_similarity_search_maps_rows(self):
        session = MagicMock()
        session.execute.return_value.all.return_value = [
            SimpleNamespace(metadata_json={"id": 9, "name": "Mug", "description": "d", "imageUrl": ""}, similarity=0.91),
        ]
        store = PgVectorStore(session_factory=lambda: session)

        hits = store.similarity_search([0.1] * 1536, k=3)

        assert hits[0][0].id == 9
        assert hits[0][1] == pytest.approx(0.91)

    def test_similarity_search_wraps_database_errors(self):
        session = MagicMock()
        session.execute.side_effect = OperationalError("SELECT", {}, Exception("relation does not exist"))
        store = PgVectorStore(session_factory=lambda: session)

        with pytest.raises(VectorStoreError):
            store.similarity_search([0.1] * 1536, k=3)

    def test_filtered_search_widens_hnsw_candidates(self):
        session = MagicMock()
        session.execute.return_value.all.return_value = []
        store = PgVectorStore(session_factory=lambda: session, filtered_ef_search=250)

        store.similarity_search([0.1] * 1536, k=5, filter={"category": "kitchen"})

        first_statement = session.execute.call_args_list[0][0][0]
        assert str(first_statement) == "SET LOCAL hnsw.ef_search = 250"
        assert session.execute.call_count == 2

    def test_unfiltered_search_keeps_default_ef_search(self):
        session = MagicMock()
        session.execute.return_value.all.return_value = []
        store = PgVectorStore(session_factory=lambda: session)

        store.similarity_search([0.1] * 1536, k=5)

        assert session.execute.call_count == 1
        assert "ef_search" not in str(session.execute.call_args[0][0])
