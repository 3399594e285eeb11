"""
Database configuration and session management.

Two storage adapters are supported through the same SQLAlchemy Session:
PostgreSQL (psycopg) in production and SQLite for local runs and tests.
The adapter is picked from DATABASE_URL.
"""

from collections.abc import Generator
from contextlib import contextmanager
import os
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from shared.config.settings import DATABASE_URL


def _calculate_pool_size() -> int:
    """(2 * CPU cores) + 1, capped at 20."""
    cores = os.cpu_count() or 4
    return min(cores * 2 + 1, 20)


def build_engine(url: str) -> Engine:
    """Create an engine with settings suited to the backing database."""
    kwargs: dict[str, Any] = {"pool_pre_ping": True, "echo": False}

    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if ":memory:" in url or url.rstrip("/") == "sqlite:":
            # One shared connection so every session sees the same in-memory DB
            kwargs["poolclass"] = StaticPool
    else:
        kwargs.update(
            pool_size=_calculate_pool_size(),
            max_overflow=15,
            pool_timeout=30,  # Wait max 30s for connection from pool
            pool_recycle=1800,  # Recycle connections after 30 minutes
            connect_args={"connect_timeout": 10},
        )

    return create_engine(url, **kwargs)


engine = build_engine(DATABASE_URL)

# Session factory
SessionLocal = sessionmaker(
    bind=engine,
    autoflush=False,
    autocommit=False,
)


def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency for database sessions.

    Usage:
        @router.get("/restaurants")
        def list_restaurants(db: Session = Depends(get_db)):
            ...

    The session is automatically closed after the request completes.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def get_db_context() -> Generator[Session, None, None]:
    """
    Context manager for database sessions outside of FastAPI.

    Usage:
        with get_db_context() as db:
            SubscriptionService(db).check_expiry_notifications()
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def safe_commit(db: Session) -> None:
    """
    Commit with automatic rollback on failure.

    Raises the original exception after rolling back.
    """
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
