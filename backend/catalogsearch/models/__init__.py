"""SQLAlchemy Models for catalog search"""

from .base import Base
from .product import Product
from .product_embedding import ProductEmbedding, EMBEDDING_DIMENSION

__all__ = [
    "Base",
    "Product",
    "ProductEmbedding",
    "EMBEDDING_DIMENSION",
]
