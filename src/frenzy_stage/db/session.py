"""Database session configuration.

Only the fishing inventory is persisted; chat sessions and history are kept
in memory by the chat hub.
"""

from __future__ import annotations

from collections.abc import Generator
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from frenzy_stage.core.settings import settings


class Base(DeclarativeBase):
    """Declarative base shared by all ORM models."""


# Ensure model modules are imported so that metadata is populated when create_all runs.
import frenzy_stage.models  # noqa: E402,F401


def _connect_args(url: str) -> dict[str, Any]:
    # FastAPI runs sync dependencies in a threadpool; SQLite must allow that.
    if url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


engine = create_engine(
    settings.effective_database_url,
    connect_args=_connect_args(settings.effective_database_url),
    pool_pre_ping=True,
    echo=settings.sql_debug,
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Yield a database session for dependency injection."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables() -> None:
    """Create the inventory tables if they do not exist yet."""
    Base.metadata.create_all(bind=engine)
