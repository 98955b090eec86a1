"""Database engine and helper utilities."""
import logging
from collections.abc import Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from contactbook.models.base import Base
from .config import settings


logger = logging.getLogger(__name__)

_MEMORY_URLS = ("sqlite://", "sqlite:///:memory:")


def _build_engine_url() -> str:
    if not settings.database_url:
        raise ValueError("DATABASE_URL is not configured")
    return settings.database_url


def build_engine(url: str, echo: bool = False) -> Engine:
    """Create an engine, applying the SQLite specifics FastAPI's threadpool needs."""
    kwargs: dict = {"echo": echo, "pool_pre_ping": True}
    if url.startswith("sqlite"):
        # Sync endpoints run in worker threads
        kwargs["connect_args"] = {"check_same_thread": False}
        if url in _MEMORY_URLS:
            # One shared connection, otherwise every checkout sees an empty database
            kwargs["poolclass"] = StaticPool
    return create_engine(url, **kwargs)


engine = build_engine(_build_engine_url(), echo=settings.debug_sql)


def create_db_and_tables(bind: Engine | None = None) -> None:
    """Create the contacts, preferences and notes tables if they do not exist."""

    target = bind if bind is not None else engine
    Base.metadata.create_all(target)
    logger.info("Database schema ensured on %s", target.url.get_backend_name())


# Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_session() -> Iterator[Session]:
    """Provide a managed SQLAlchemy session for FastAPI dependency injection."""
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
