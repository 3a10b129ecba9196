"""Database session configuration."""

from __future__ import annotations

from collections.abc import Generator
from typing import Any

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from pageant_vote.core.settings import settings


class Base(DeclarativeBase):
    """Declarative base shared by all ORM models."""


# Ensure model modules are imported so that metadata is populated when create_all runs.
import pageant_vote.models  # noqa: E402,F401


def build_engine(url: str, *, echo: bool = False, **kwargs: Any) -> Engine:
    """Create an engine with the isolation settings the vote protocol relies on.

    PostgreSQL runs at READ COMMITTED; the unique constraints, not row locks,
    decide which of two racing writers wins. SQLite connections may be shared
    across the request threadpool and wait on the writer lock instead of failing.
    """
    if url.startswith("sqlite"):
        connect_args = kwargs.pop("connect_args", {})
        connect_args.setdefault("check_same_thread", False)
        connect_args.setdefault("timeout", 30)
        return create_engine(url, echo=echo, connect_args=connect_args, **kwargs)
    return create_engine(
        url,
        echo=echo,
        pool_pre_ping=True,
        isolation_level="READ COMMITTED",
        **kwargs,
    )


engine = build_engine(settings.effective_database_url, echo=settings.sql_debug)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Yield a database session for dependency injection."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables() -> None:
    """Create all database tables."""
    Base.metadata.create_all(bind=engine)
