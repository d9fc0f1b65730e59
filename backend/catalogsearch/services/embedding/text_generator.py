"""Embedding Text Generator - Build the text and metadata embedded for a product.

Text format is "{name} {description}": name first, one space, description.
"""

from typing import Any

from ...domain.search import ProductInput, ProductMetadata


def generate_product_embedding_text(name: str, description: str) -> str:
    """Generate the text blob embedded for a product.

    Args:
        name: Product name
        description: Product description

    Returns:
        Text string for embedding

    Example:
        >>> generate_product_embedding_text("Blue Ceramic Mug", "A sturdy hand-glazed mug")
        'Blue Ceramic Mug A sturdy hand-glazed mug'

    Notes:
        - Fields are used verbatim (no trimming, no normalisation)
    """
    return f"{name} {description}"


def build_product_metadata(product: ProductInput) -> ProductMetadata:
    """Metadata stored next to the product vector.

    popularity and rating are lifted out of product.attributes into their own
    fields; all other attributes are kept as extras.
    """
    attributes: dict[str, Any] = dict(product.attributes or {})
    popularity = attributes.pop("popularity", None)
    rating = attributes.pop("rating", None)

    return ProductMetadata(
        id=product.id,
        name=product.name,
        description=product.description,
        image_url=product.image_url or "",
        popularity=popularity,
        rating=rating,
        extra=attributes,
    )
