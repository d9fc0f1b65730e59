"""Embedding Ingestion - Embed products and write them into the vector store.

Runs right after a product row is committed. Failures are reported in the
returned IngestionResult and never raised: the product row stays in place.
"""

import logging

from ...domain.ai import EmbeddingProviderPort
from ...domain.search import IngestionResult, ProductInput, VectorRecord, VectorStorePort
from ...observability.metrics import ingestion_total
from .text_generator import generate_product_embedding_text, build_product_metadata

logger = logging.getLogger(__name__)


def _validate_products(products: list[ProductInput]) -> None:
    if not products:
        raise ValueError("At least one product is required")

    for index, product in enumerate(products):
        if not product.name or not product.name.strip():
            raise ValueError(f"Product at index {index} has no name")
        if not product.description or not product.description.strip():
            raise ValueError(f"Product at index {index} has no description")


def store_product_embeddings(
    products: list[ProductInput],
    embedding_provider: EmbeddingProviderPort,
    vector_store: VectorStorePort,
) -> IngestionResult:
    """Generate embeddings for products and store them with their metadata.

    One provider call embeds every product's "{name} {description}" text,
    then one vector store write persists a record per product.

    Args:
        products: Products to ingest (non-empty; name and description required)
        embedding_provider: Embedding provider port
        vector_store: Vector store port bound to the target collection

    Returns:
        IngestionResult: success flag, number of records written, error on failure

    Notes:
        - Not idempotent: ingesting the same product twice stores two records
        - Nothing is rolled back on failure; products already saved stay saved
    """
    try:
        _validate_products(products)

        texts = [generate_product_embedding_text(p.name, p.description) for p in products]
        embeddings = embedding_provider.batch_embed_texts(texts)

        records = [
            VectorRecord(content=text, embedding=result.embedding, metadata=build_product_metadata(product))
            for product, text, result in zip(products, texts, embeddings)
        ]
        written = vector_store.add_records(records)

    except Exception as e:
        logger.error(
            f"Error storing product embeddings: {e}",
            extra={
                "product_id": [p.id for p in products] if products else [],
                "error_type": type(e).__name__,
            },
            exc_info=True,
        )
        ingestion_total.labels(status="failed").inc()
        return IngestionResult(success=False, error=str(e), error_type=type(e).__name__)

    ingestion_total.labels(status="success").inc()
    logger.info(
        f"Stored embeddings for {written} product(s)",
        extra={"product_id": [p.id for p in products]},
    )
    return IngestionResult(success=True, records_written=written)
