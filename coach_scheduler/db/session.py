from __future__ import annotations

from collections.abc import Generator
from contextlib import contextmanager

from loguru import logger
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from coach_scheduler.config.settings import settings

# Lazy initialization to avoid import-time database connections
_engine: Engine | None = None
_SessionLocal: sessionmaker | None = None


def _get_engine() -> Engine:
    """Get or create the database engine (lazy initialization).

    In-memory SQLite uses a single shared connection so every session sees
    the same database.
    """
    global _engine
    if _engine is None:
        database_url = settings.database_url
        logger.info(f"Initializing database engine: {database_url}")

        if database_url.startswith("sqlite"):
            kwargs: dict = {"connect_args": {"check_same_thread": False}}
            if ":memory:" in database_url:
                kwargs["poolclass"] = StaticPool
        else:
            kwargs = {"pool_pre_ping": True, "pool_recycle": 3600}

        _engine = create_engine(database_url, echo=False, **kwargs)

        from coach_scheduler.db.models import Base

        Base.metadata.create_all(bind=_engine)
        logger.info("Database engine initialized")
    return _engine


def _get_session_local() -> sessionmaker:
    """Get or create the session factory (lazy initialization)."""
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=_get_engine())
        logger.info("Database session factory initialized")
    return _SessionLocal


@contextmanager
def get_session() -> Generator[Session, None, None]:
    """Get database session context manager.

    Commits on success, rolls back and re-raises on any exception.
    """
    logger.debug("Creating new database session")
    session = _get_session_local()()
    try:
        yield session
        if session.dirty or session.new or session.deleted:
            session.commit()
            logger.debug("Database session committed successfully")
    except Exception as e:
        logger.error(f"Database error, rolling back: {e}")
        session.rollback()
        raise
    finally:
        session.close()
