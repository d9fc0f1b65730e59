"""PgVector Store - VectorStorePort backed by PostgreSQL + pgvector.

Provides cosine similarity search over the documents table using the HNSW index.
"""

import logging
from typing import Any, Optional

from sqlalchemy import select, text, type_coerce
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from ...domain.search import ProductMetadata, VectorRecord, VectorStorePort, VectorStoreError
from ...models import ProductEmbedding

logger = logging.getLogger(__name__)

# hnsw.ef_search for filtered queries (pgvector caps it at 1000)
FILTERED_EF_SEARCH = 400


class PgVectorStore(VectorStorePort):
    """pgvector implementation of VectorStorePort.

    One instance per process: it holds the session factory (and through it
    the pooled engine) and opens a short-lived session per call.

    Notes:
        - pgvector <=> is cosine distance (0 = identical, 2 = opposite)
        - Raw score = 1 - distance, i.e. plain cosine similarity
        - Filters use JSONB containment (metadata @> filter), so every
          key/value pair must match exactly
        - With the HNSW index the filter runs after the approximate index
          scan, which only yields hnsw.ef_search candidates (default 40).
          Filtered queries raise ef_search to filtered_ef_search for the
          transaction. A very selective filter can still return fewer than
          k rows when fewer matching rows are among the scanned candidates.
    """

    def __init__(
        self,
        session_factory: sessionmaker,
        collection: str = "documents",
        filtered_ef_search: int = FILTERED_EF_SEARCH,
    ):
        self.session_factory = session_factory
        self.collection = collection
        self.filtered_ef_search = filtered_ef_search

    def add_records(self, records: list[VectorRecord]) -> int:
        session = self.session_factory()
        try:
            for record in records:
                session.add(ProductEmbedding(
                    collection=self.collection,
                    product_id=record.metadata.id,
                    content=record.content,
                    metadata_json=record.metadata.to_dict(),
                    embedding=record.embedding,
                ))
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            raise VectorStoreError(f"Failed to write {len(records)} embedding record(s): {e}") from e
        finally:
            session.close()

        logger.debug(f"Stored {len(records)} embedding record(s) in collection {self.collection}")
        return len(records)

    def build_search_query(
        self,
        query_vector: list[float],
        k: int,
        filter: Optional[dict[str, Any]] = None,
    ):
        """Build the k-NN select statement (exposed for inspection in tests)."""
        distance = ProductEmbedding.embedding.cosine_distance(query_vector)
        query = (
            select(
                ProductEmbedding.metadata_json,
                (1 - distance).label("similarity"),
            )
            .where(ProductEmbedding.collection == self.collection)
            .order_by(distance, ProductEmbedding.id)
            .limit(k)
        )

        if filter:
            query = query.where(type_coerce(ProductEmbedding.metadata_json, JSONB).contains(filter))

        return query

    def similarity_search(
        self,
        query_vector: list[float],
        k: int,
        filter: Optional[dict[str, Any]] = None,
    ) -> list[tuple[ProductMetadata, float]]:
        query = self.build_search_query(query_vector, k, filter)

        session = self.session_factory()
        try:
            if filter:
                # SET does not take bind parameters; the value is an int
                session.execute(text(f"SET LOCAL hnsw.ef_search = {int(self.filtered_ef_search)}"))
            rows = session.execute(query).all()
        except SQLAlchemyError as e:
            raise VectorStoreError(f"Similarity query failed: {e}") from e
        finally:
            session.close()

        return [
            (ProductMetadata.from_dict(row.metadata_json or {}), float(row.similarity))
            for row in rows
        ]
