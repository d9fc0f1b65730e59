"""ProductEmbedding Model - Vector embeddings for product semantic search.

Backs the pgvector implementation of the vector store.
"""

from pgvector.sqlalchemy import Vector
from sqlalchemy import Column, BigInteger, Integer, String, Text, DateTime, Index
from sqlalchemy.sql import func

from .base import Base, PortableJSONB

# text-embedding-3-small
EMBEDDING_DIMENSION = 1536


class ProductEmbedding(Base):
    """Embedding record for one ingested product.

    Stores the embedded text, its vector and a JSON copy of the product
    metadata. Search results are rebuilt from the metadata alone, so the
    product table is never joined at query time.

    Attributes:
        id: Primary key
        collection: Logical collection name (e.g. 'documents')
        product_id: Weak reference to product.id (no foreign key)
        content: Embedded text ("{name} {description}")
        metadata_json: Product metadata (id, name, description, imageUrl, extras)
        embedding: Vector embedding (pgvector VECTOR type)
        created_at: Creation timestamp

    Indexes:
        - collection: restricts every query to one collection
        - GIN(metadata): created in migration, serves metadata @> filter
        - HNSW(embedding vector_cosine_ops): created in migration

    Notes:
        - No uniqueness on product_id: re-ingesting a product adds a second row
    """

    __tablename__ = "documents"

    id = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True)
    collection = Column(String(100), nullable=False, default="documents")
    product_id = Column(Integer, nullable=True, index=True)
    content = Column(Text, nullable=False)
    metadata_json = Column("metadata", PortableJSONB, nullable=False, default=dict)
    embedding = Column(Vector(EMBEDDING_DIMENSION), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (
        Index("idx_documents_collection", "collection"),
    )

    def __repr__(self) -> str:
        return (
            f"<ProductEmbedding(id={self.id}, product_id={self.product_id}, "
            f"collection={self.collection})>"
        )
