"""Engine, session factory and the declarative base shared by all models."""

from __future__ import annotations

from typing import Any, Dict, Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from app.config import Settings, get_settings

Base = declarative_base()


def build_engine(settings: Settings | None = None) -> Engine:
    """Create an engine for the configured database URL."""
    settings = settings or get_settings()
    kwargs: Dict[str, Any] = {"pool_pre_ping": True}
    if settings.is_sqlite:
        kwargs["connect_args"] = {"check_same_thread": False}
        if settings.database_url_obj.database in (None, "", ":memory:"):
            # One shared connection, otherwise every checkout sees an empty database
            kwargs["poolclass"] = StaticPool
    else:
        kwargs.update(
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
            pool_timeout=settings.database_pool_timeout,
            connect_args={
                "application_name": settings.app_name,
                "connect_timeout": settings.database_pool_timeout,
            },
        )
    return create_engine(settings.database_url, **kwargs)


engine = build_engine()
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)


def get_db() -> Iterator[Session]:
    """FastAPI dependency yielding a request-scoped session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
