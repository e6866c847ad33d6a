"""
db/session.py

SQLAlchemy engine and session factory for worker persistence.

The engine is created lazily on first use so importing routers, services
or tests never opens a connection.
"""

from __future__ import annotations

import os
from collections.abc import Generator
from dataclasses import dataclass
from functools import lru_cache

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from db.config import resolve_database_url


def _get_bool_env(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _get_int_env(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


@dataclass(frozen=True)
class EngineSettings:
    """
    Connection pool settings read from the environment.
    """

    url: str
    echo: bool = False
    pool_recycle: int = 1800
    pool_size: int = 5
    max_overflow: int = 10


def load_engine_settings() -> EngineSettings:
    url = resolve_database_url()
    if not url.startswith("postgresql"):
        raise RuntimeError("Only PostgreSQL URLs are supported.")

    return EngineSettings(
        url=url,
        echo=_get_bool_env("SQL_ECHO", default=False),
        pool_recycle=_get_int_env("DB_POOL_RECYCLE", 1800),
        pool_size=_get_int_env("DB_POOL_SIZE", 5),
        max_overflow=_get_int_env("DB_MAX_OVERFLOW", 10),
    )


@lru_cache(maxsize=1)
def get_engine() -> Engine:
    """Return the shared engine, creating it on first call."""
    settings = load_engine_settings()
    return create_engine(
        settings.url,
        echo=settings.echo,
        pool_pre_ping=True,
        pool_recycle=settings.pool_recycle,
        pool_size=settings.pool_size,
        max_overflow=settings.max_overflow,
    )


@lru_cache(maxsize=1)
def _get_session_factory() -> sessionmaker:
    return sessionmaker(
        bind=get_engine(),
        class_=Session,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )


def SessionLocal() -> Session:
    """Open a new session on the shared engine."""
    return _get_session_factory()()


def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency yielding one session per request.
    """

    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
