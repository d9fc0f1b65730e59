#!/usr/bin/env python
"""Seed script to load a product catalog and index it for semantic search.

Reads a JSON array of products, inserts them into the product table and
stores their embeddings in the configured vector store with a single batch
embedding call. Run once against a fresh database to get a searchable demo
catalog.

Usage:
    python backend/scripts/seed_products.py products.json

Input format:
    [
        {"name": "Blue Ceramic Mug", "description": "...", "image_url": "...",
         "attributes": {"category": "kitchen", "rating": 4.5}}
    ]

Environment Variables:
    DATABASE_URL: PostgreSQL connection string
    OPENAI_API_KEY: API key for the embedding model
    VECTOR_STORE_BACKEND: pgvector (default) or memory
"""

import json
import sys
from pathlib import Path

from catalogsearch.database import get_db_session
from catalogsearch.dependencies import get_embedding_provider, get_vector_store
from catalogsearch.domain.search import ProductInput
from catalogsearch.models.product import Product
from catalogsearch.services.embedding import store_product_embeddings


def main():
    """Insert and index the products from the given file."""
    if len(sys.argv) != 2:
        print("Usage: python seed_products.py <products.json>")
        sys.exit(1)

    path = Path(sys.argv[1])
    try:
        entries = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        print(f"ERROR: Could not read {path}: {e}")
        sys.exit(1)

    if not isinstance(entries, list) or not entries:
        print("ERROR: Expected a non-empty JSON array of products")
        sys.exit(1)

    with get_db_session() as session:
        products = []
        for entry in entries:
            product = Product(
                name=entry["name"],
                description=entry["description"],
                image_url=entry.get("image_url"),
            )
            session.add(product)
            products.append((product, entry.get("attributes", {})))
        session.flush()

        inputs = [
            ProductInput(
                id=product.id,
                name=product.name,
                description=product.description,
                image_url=product.image_url,
                attributes=attributes,
            )
            for product, attributes in products
        ]

    result = store_product_embeddings(inputs, get_embedding_provider(), get_vector_store())

    print(f"SUCCESS: {len(inputs)} product(s) created")
    if result.success:
        print(f"  Indexed: {result.records_written}")
    else:
        print(f"  WARNING: Embeddings failed ({result.error_type}): {result.error}")
        sys.exit(2)


if __name__ == "__main__":
    main()
