"""Product catalog and semantic search API endpoints"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from fastapi.responses import JSONResponse
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from ..config import Settings, get_settings
from ..database import get_db
from ..dependencies import get_embedding_provider, get_object_storage, get_search_service, get_vector_store
from ..domain.ai import EmbeddingProviderPort
from ..domain.search import ProductInput, VectorStorePort, with_debug
from ..domain.storage import ObjectStoragePort
from ..infrastructure.storage import StorageError
from ..models.product import Product
from ..services.embedding import SemanticSearchService, store_product_embeddings
from .schemas import ProductResponse, SearchMeta, SearchParamsEcho, SearchResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["catalog"])


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _serialize(product: Product) -> dict:
    return ProductResponse.model_validate(product).model_dump(by_alias=True)


# ============================================================================
# Products
# ============================================================================

@router.post("/products", status_code=status.HTTP_201_CREATED)
async def create_product(
    name: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    storage: ObjectStoragePort = Depends(get_object_storage),
    embedding_provider: EmbeddingProviderPort = Depends(get_embedding_provider),
    vector_store: VectorStorePort = Depends(get_vector_store),
):
    """
    Create a product, upload its image and index it for semantic search.

    Steps:
    1. Validate name and description
    2. Upload the image (if any) to object storage
    3. Insert the product row
    4. Store the product embedding

    An embedding failure does not undo the product: the response is still
    201, with a warning.

    Returns:
        201 {"product": {...}} or {"warning": ..., "product": {...}}
        400 if name or description is missing
        500 if the image upload or the insert fails
    """
    if not name or not name.strip() or not description or not description.strip():
        return _error(status.HTTP_400_BAD_REQUEST, "Name and description are required")

    image_url = None
    if image is not None and image.filename:
        try:
            stored = await storage.upload_image(
                file=image.file,
                filename=image.filename,
                content_type=image.content_type or "application/octet-stream",
            )
            image_url = stored.public_url
        except (StorageError, ValueError) as e:
            logger.error(f"Error uploading image: {e}", extra={"error_type": type(e).__name__})
            return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to upload image")

    product = Product(name=name, description=description, image_url=image_url)
    try:
        db.add(product)
        db.commit()
        db.refresh(product)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error creating product: {e}", exc_info=True)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to create product")

    logger.info(f"Product created: id={product.id}", extra={"product_id": product.id})

    # Blocking OpenAI and vector store calls; keep them off the event loop
    result = await run_in_threadpool(
        store_product_embeddings,
        [ProductInput(id=product.id, name=product.name, description=product.description, image_url=product.image_url)],
        embedding_provider,
        vector_store,
    )

    body = {"product": _serialize(product)}
    if not result.success:
        logger.error(
            f"Error generating embeddings: {result.error}",
            extra={"product_id": product.id, "error_type": result.error_type},
        )
        body = {"warning": "Product created but embeddings failed", **body}

    return JSONResponse(status_code=status.HTTP_201_CREATED, content=body)


@router.get("/products")
async def list_products(db: Session = Depends(get_db)):
    """List all products, newest first."""
    stmt = select(Product).order_by(Product.created_at.desc(), Product.id.desc())
    products = db.execute(stmt).scalars().all()
    return {"products": [_serialize(p) for p in products]}


# ============================================================================
# Semantic search
# ============================================================================

@router.get("/search")
def search(
    q: Optional[str] = Query(None, description="Free-text search query"),
    limit: Optional[int] = Query(None, ge=1, description="Maximum number of results"),
    min_score: Optional[float] = Query(None, alias="minScore", ge=0.0, le=1.0, description="Minimum relevance 0.0-1.0"),
    category: Optional[str] = Query(None, description="Exact category filter"),
    search_service: SemanticSearchService = Depends(get_search_service),
    settings: Settings = Depends(get_settings),
):
    """
    Semantic product search.

    Returns:
        200 {"results": [...], "meta": {...}}; each result carries
            debug.relevancePercentage
        400 if q is missing
        503 if the embedding provider or vector store failed
    """
    if not q:
        return _error(status.HTTP_400_BAD_REQUEST, "Search query is required")

    effective_limit = limit or settings.SEARCH_DEFAULT_LIMIT
    effective_min_score = min_score if min_score is not None else settings.SEARCH_DEFAULT_MIN_SCORE
    filter_category = category or None
    search_filter = {"category": filter_category} if filter_category else {}

    outcome = search_service.search(
        q,
        limit=effective_limit,
        filter=search_filter,
        min_score=effective_min_score,
    )
    if not outcome.ok:
        return _error(status.HTTP_503_SERVICE_UNAVAILABLE, "Search is temporarily unavailable")

    results = [with_debug(r) for r in outcome.results]
    response = SearchResponse(
        results=results,
        meta=SearchMeta(
            query=q,
            total_results=len(results),
            search_params=SearchParamsEcho(
                limit=effective_limit,
                min_score=effective_min_score,
                filter_category=filter_category,
            ),
        ),
    )
    return response.model_dump(by_alias=True)
