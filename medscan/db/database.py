"""
Database configuration and session management.
Synchronous SQLAlchemy sessions; SQLite by default, any SQLAlchemy URL works.
"""

from typing import Generator, Optional
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from sqlalchemy.pool import StaticPool

from medscan.core.config import settings

# Base class for all models
Base = declarative_base()


def create_db_engine(database_url: Optional[str] = None, echo: bool = False) -> Engine:
    """Create an engine; in-memory SQLite shares one connection across threads."""
    url = database_url or settings.database_url
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in url:
            kwargs["poolclass"] = StaticPool
        return create_engine(url, echo=echo, **kwargs)
    return create_engine(url, echo=echo, pool_pre_ping=True)


engine = create_db_engine(echo=settings.debug)

SessionLocal = sessionmaker(
    bind=engine,
    autoflush=True,
    autocommit=False,
)


def get_sync_session() -> Generator[Session, None, None]:
    """
    Dependency to get a database session.
    Commits on success, rolls back on error.
    """
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def init_db(bind: Optional[Engine] = None):
    """
    Create database tables.
    """
    # Import all models to ensure they're registered
    from medscan.db.models import product  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)


def close_db():
    """
    Close database connections gracefully.
    """
    engine.dispose()
