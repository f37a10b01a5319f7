"""Taskflow database engine and session management."""

from __future__ import annotations

from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from .config import get_config
from .models import Base


# Module-level cache for engine
_engine: Optional[Engine] = None
_sessionmaker: Optional[sessionmaker] = None


def get_engine(database_url: Optional[str] = None) -> Engine:
    """Get or create the SQLAlchemy engine.

    Args:
        database_url: Optional override for the database URL.
                     If not provided, uses config.

    Returns:
        SQLAlchemy Engine instance.
    """
    global _engine, _sessionmaker

    if database_url is None:
        database_url = get_config().database_url

    # Return cached engine if URL matches
    if _engine is not None and _engine.url.render_as_string(hide_password=False) == database_url:
        return _engine

    # Status syncs run in worker threads
    connect_args = {}
    if database_url.startswith("sqlite:"):
        connect_args = {"check_same_thread": False}

    if _engine is not None:
        _engine.dispose()

    _engine = create_engine(
        database_url,
        connect_args=connect_args,
        echo=False,
        pool_pre_ping=True,
    )
    _sessionmaker = sessionmaker(bind=_engine, autoflush=False, expire_on_commit=False)
    return _engine


def get_session(database_url: Optional[str] = None) -> Session:
    """Create a new database session bound to the cached engine."""
    if _sessionmaker is None or database_url is not None:
        get_engine(database_url)
    return _sessionmaker()


def init_db(database_url: Optional[str] = None) -> None:
    """Create all tables if they don't exist. Safe to call multiple times."""
    engine = get_engine(database_url)
    Base.metadata.create_all(engine)


def reset_engine() -> None:
    global _engine, _sessionmaker
    if _engine is not None:
        _engine.dispose()
    _engine = None
    _sessionmaker = None
