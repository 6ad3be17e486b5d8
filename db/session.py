"""
db/session.py

SQLAlchemy engine and session factory for the school database.

Nothing connects at import time: the engine is built on first use, so
tests and tools can import the API modules without a live database.
"""

from __future__ import annotations

from collections.abc import Generator
from functools import lru_cache

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from db.config import get_engine_settings


@lru_cache(maxsize=1)
def get_engine() -> Engine:
    """Return the shared engine, creating it on first call."""
    settings = get_engine_settings()
    return create_engine(
        settings.url,
        echo=settings.echo,
        pool_pre_ping=True,
        pool_recycle=settings.pool_recycle,
        pool_size=settings.pool_size,
        max_overflow=settings.max_overflow,
    )


@lru_cache(maxsize=1)
def _session_factory() -> sessionmaker:
    # Bulk imports return the inserted records after commit.
    return sessionmaker(bind=get_engine(), autoflush=False, expire_on_commit=False)


def SessionLocal() -> Session:
    """Open a new session on the shared engine."""
    return _session_factory()()


def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency yielding one session per request.
    """

    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
