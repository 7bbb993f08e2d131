"""SQLAlchemy engine/session helpers for the expense store.

Usage
-----
from expense_analysis.db.client import session_scope

with session_scope(database_url=url) as s:
    s.execute(...)

Engines are created lazily and cached per database URL, so one process can
talk to several stores (e.g. a temporary SQLite file per test).
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

DATABASE_URL_ENV = "DATABASE_URL"

_ENGINES: dict[str, Engine] = {}
_SESSION_MAKERS: dict[str, sessionmaker[Session]] = {}


def resolve_database_url(override: str | None = None) -> str:
    url = override or os.getenv(DATABASE_URL_ENV)
    if not url:
        raise RuntimeError(
            f"{DATABASE_URL_ENV} is not set; pass --database-url or set it in the environment/.env"
        )
    return url


def get_engine(*, database_url: str | None = None) -> Engine:
    """Return the engine for ``database_url``, creating it on first use."""

    url = resolve_database_url(database_url)
    engine = _ENGINES.get(url)
    if engine is None:
        engine = create_engine(url, pool_pre_ping=True)
        _ENGINES[url] = engine
        _SESSION_MAKERS[url] = sessionmaker(bind=engine, expire_on_commit=False, class_=Session)
    return engine


def get_session(*, database_url: str | None = None) -> Session:
    """Return a new session bound to the cached engine for ``database_url``."""

    url = resolve_database_url(database_url)
    get_engine(database_url=url)
    return _SESSION_MAKERS[url]()


@contextmanager
def session_scope(*, database_url: str | None = None) -> Iterator[Session]:
    """Provide a transactional scope around a series of operations."""

    session = get_session(database_url=database_url)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def dispose_engines() -> None:
    """Dispose and forget every cached engine."""

    for engine in _ENGINES.values():
        engine.dispose()
    _ENGINES.clear()
    _SESSION_MAKERS.clear()


__all__ = [
    "DATABASE_URL_ENV",
    "dispose_engines",
    "get_engine",
    "get_session",
    "resolve_database_url",
    "session_scope",
]
