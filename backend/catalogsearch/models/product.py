"""Product SQLAlchemy model"""

from sqlalchemy import Column, Integer, Text, DateTime, Index
from sqlalchemy.sql import func

from .base import Base


class Product(Base):
    """Catalog product shown in the storefront.

    Rows are created once and never updated or deleted by this service.
    image_url is the public object-storage URL of the uploaded image, or NULL.
    """
    __tablename__ = "product"
    __table_args__ = (
        Index("ix_product_created_at", "created_at"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False)
    description = Column(Text, nullable=False)
    image_url = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    def __repr__(self) -> str:
        return f"<Product(id={self.id}, name={self.name!r})>"
