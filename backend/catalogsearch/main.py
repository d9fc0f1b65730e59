"""FastAPI application for the catalog search service.

Mounts the product, search and chat routers under /api and the health and
metrics endpoints at the root. Logging is configured at import time so that
module-level loggers created during router import already use it.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from . import __version__
from .catalog.router import router as catalog_router
from .chat.router import router as chat_router
from .config import get_settings
from .database import get_engine
from .observability.logging_config import configure_logging
from .observability.middleware import REQUEST_ID_HEADER, RequestIDMiddleware
from .observability.router import router as observability_router

settings = get_settings()

configure_logging(level=settings.LOG_LEVEL, json_format=settings.LOG_JSON)

logger = logging.getLogger(__name__)

_docs_enabled = settings.ENVIRONMENT != "production"

API_PREFIX = "/api"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Clients (OpenAI, database engine, S3) are created lazily on first use.

    Shutdown disposes the engine pool if a request ever created it.
    """
    logger.info("Catalog Search API starting up...")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(f"Vector store backend: {settings.VECTOR_STORE_BACKEND} (collection={settings.VECTOR_COLLECTION})")

    yield

    logger.info("Catalog Search API shutting down...")
    if get_engine.cache_info().currsize:
        get_engine().dispose()


app = FastAPI(
    title="Catalog Search API",
    description="Semantic product search with embeddings and a conversational assistant",
    version=__version__,
    docs_url="/docs" if _docs_enabled else None,
    redoc_url="/redoc" if _docs_enabled else None,
    openapi_url="/openapi.json" if _docs_enabled else None,
    lifespan=lifespan,
)


app.add_middleware(RequestIDMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[origin.strip() for origin in settings.CORS_ORIGINS.split(",")],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=[REQUEST_ID_HEADER],
)


def _error_response(status_code: int, error: str, message: str, **extra: Any) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": error, "message": message, **extra})


def jsonable_errors(exc: RequestValidationError) -> list[dict[str, Any]]:
    # ctx and input may hold non-serializable values (exceptions, UploadFile)
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
        for err in exc.errors()
    ]


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning(
        f"Validation error on {request.method} {request.url.path}",
        extra={"method": request.method, "path": request.url.path},
    )
    return _error_response(
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        "validation_error",
        "Request validation failed",
        details=jsonable_errors(exc),
    )


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error(f"Database error on {request.method} {request.url.path}", exc_info=exc)
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR, "database_error", "A database error occurred. Please try again later."
    )


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last resort for anything a router did not turn into a response."""
    logger.error(f"Unhandled exception on {request.method} {request.url.path}", exc_info=exc)
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR, "internal_error", "An unexpected error occurred. Please try again later."
    )


app.include_router(observability_router)
app.include_router(catalog_router, prefix=API_PREFIX)
app.include_router(chat_router, prefix=API_PREFIX)


@app.get("/", include_in_schema=False)
async def root() -> dict[str, Any]:
    return {
        "name": "Catalog Search API",
        "version": __version__,
        "status": "running",
        "docs": "/docs" if _docs_enabled else None,
        "endpoints": {
            "products": f"{API_PREFIX}/products",
            "search": f"{API_PREFIX}/search",
            "chat": f"{API_PREFIX}/chat",
        },
    }


if __name__ == "__main__":
    import os

    import uvicorn

    uvicorn.run(
        "catalogsearch.main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        reload=settings.ENVIRONMENT == "development",
        log_level=settings.LOG_LEVEL.lower(),
    )
