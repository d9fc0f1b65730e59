"""Unit tests for embedding ingestion.

store_product_embeddings never raises: every failure comes back as an
IngestionResult with success=False.
"""

from unittest.mock import MagicMock

from catalogsearch.domain.search import ProductInput, VectorStoreError
from catalogsearch.services.embedding import (
    build_product_metadata,
    generate_product_embedding_text,
    store_product_embeddings,
)


def _mug(product_id: int = 1, **attributes) -> ProductInput:
    return ProductInput(
        id=product_id,
        name="Blue Ceramic Mug",
        description="A sturdy hand-glazed mug",
        attributes=attributes,
    )


class TestEmbeddingText:

    def test_name_then_description(self):
        assert generate_product_embedding_text("Blue Ceramic Mug", "A sturdy hand-glazed mug") == (
            "Blue Ceramic Mug A sturdy hand-glazed mug"
        )

    def test_fields_used_verbatim(self):
        assert generate_product_embedding_text(" Mug ", "Tall\nmug") == " Mug  Tall\nmug"


class TestProductMetadata:

    def test_missing_image_becomes_empty_string(self):
        meta = build_product_metadata(_mug())

        assert meta.image_url == ""
        assert meta.to_dict()["imageUrl"] == ""

    def test_attributes_split_into_fields_and_extras(self):
        meta = build_product_metadata(_mug(popularity=42, rating=4.5, category="kitchen"))

        assert meta.popularity == 42
        assert meta.rating == 4.5
        assert meta.extra == {"category": "kitchen"}


class TestStoreProductEmbeddings:

    def test_single_product_stored(self, fake_embedder, vector_store):
        result = store_product_embeddings([_mug()], fake_embedder, vector_store)

        assert result.success is True
        assert result.records_written == 1
        assert result.to_dict() == {"success": True}
        assert len(vector_store) == 1

    def test_batch_uses_one_provider_call(self, fake_embedder, vector_store):
        products = [
            _mug(1),
            ProductInput(id=2, name="Steel Chef Knife", description="Forged blade"),
            ProductInput(id=3, name="Linen Apron", description="Washed linen"),
        ]

        result = store_product_embeddings(products, fake_embedder, vector_store)

        assert result.success is True
        assert result.records_written == 3
        assert fake_embedder.calls == [[
            "Blue Ceramic Mug A sturdy hand-glazed mug",
            "Steel Chef Knife Forged blade",
            "Linen Apron Washed linen",
        ]]

    def test_stored_record_carries_text_and_metadata(self, fake_embedder):
        store = MagicMock()
        store.add_records.return_value = 1

        store_product_embeddings([_mug(5, category="kitchen")], fake_embedder, store)

        [record] = store.add_records.call_args[0][0]
        assert record.content == "Blue Ceramic Mug A sturdy hand-glazed mug"
        assert record.metadata.id == 5
        assert record.metadata.to_dict()["category"] == "kitchen"

    def test_provider_failure_reported(self, failing_embedder, vector_store):
        result = store_product_embeddings([_mug()], failing_embedder, vector_store)

        assert result.success is False
        assert "connection refused" in result.error
        assert result.error_type == "EmbeddingServiceError"
        assert len(vector_store) == 0

    def test_store_failure_reported(self, fake_embedder):
        store = MagicMock()
        store.add_records.side_effect = VectorStoreError("Failed to write 1 embedding record(s)")

        result = store_product_embeddings([_mug()], fake_embedder, store)

        assert result.success is False
        assert result.to_dict() == {"success": False, "error": "Failed to write 1 embedding record(s)"}

    def test_empty_list_rejected(self, fake_embedder, vector_store):
        result = store_product_embeddings([], fake_embedder, vector_store)

        assert result.success is False
        assert result.error_type == "ValueError"
        assert fake_embedder.calls == []

    def test_blank_description_rejected(self, fake_embedder, vector_store):
        product = ProductInput(id=1, name="Mug", description="   ")

        result = store_product_embeddings([product], fake_embedder, vector_store)

        assert result.success is False
        assert "description" in result.error
        assert len(vector_store) == 0

    def test_reingesting_adds_a_second_record(self, fake_embedder, vector_store):
        store_product_embeddings([_mug()], fake_embedder, vector_store)
        store_product_embeddings([_mug()], fake_embedder, vector_store)

        assert len(vector_store) == 2
