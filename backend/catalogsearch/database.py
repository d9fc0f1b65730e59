"""Database engine and session factory.

One engine per process, created lazily from settings and reused by the
catalog endpoints and the pgvector store.
"""

from contextlib import contextmanager
from functools import lru_cache
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session

from .config import get_settings


@lru_cache()
def get_engine() -> Engine:
    """Create the process-wide engine with connection pooling.

    Pool settings only apply to PostgreSQL (not SQLite).
    """
    database_url = get_settings().DATABASE_URL

    engine_kwargs = {
        "pool_pre_ping": True,  # Verify connections before using
        "echo": False,
    }
    if not database_url.startswith("sqlite"):
        engine_kwargs["pool_size"] = 5
        engine_kwargs["max_overflow"] = 10

    return create_engine(database_url, **engine_kwargs)


@lru_cache()
def get_session_factory() -> sessionmaker:
    """Session factory bound to the process-wide engine."""
    return sessionmaker(autocommit=False, autoflush=False, bind=get_engine())


@contextmanager
def get_db_session() -> Generator[Session, None, None]:
    """Context manager for database sessions.

    Usage:
        with get_db_session() as session:
            session.query(Product).all()

    Automatically commits on success, rolls back on exception.
    """
    session = get_session_factory()()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def get_db() -> Generator[Session, None, None]:
    """Dependency for FastAPI endpoints.

    Usage:
        @app.get("/products")
        def list_products(db: Session = Depends(get_db)):
            return db.query(Product).all()
    """
    db = get_session_factory()()
    try:
        yield db
    finally:
        db.close()
