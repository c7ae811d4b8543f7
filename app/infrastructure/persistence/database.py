"""Persistence: async SQLAlchemy engine construction for SQL adapters.

Engines are created by the adapter factory when DATABASE_URL is a SQL URL
(sqlite+aiosqlite, postgresql+asyncpg). Pool options only apply to server
databases; SQLite uses SQLAlchemy's default pool for aiosqlite.
"""

import logging
from pathlib import Path
from typing import Any

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

logger = logging.getLogger(__name__)

DEFAULT_POOL_SIZE = 5
DEFAULT_MAX_OVERFLOW = 10


def create_engine_for(
    database_url: str,
    *,
    echo: bool = False,
    pool_size: int | None = None,
    max_overflow: int | None = None,
) -> AsyncEngine:
    """Create an AsyncEngine for the URL.

    Args:
        database_url: SQLAlchemy async URL.
        echo: Log SQL statements.
        pool_size: Server databases only; None uses DEFAULT_POOL_SIZE.
        max_overflow: Server databases only; None uses DEFAULT_MAX_OVERFLOW.
    """
    url = make_url(database_url)
    kwargs: dict[str, Any] = {"echo": echo}
    if url.get_backend_name() == "sqlite":
        _ensure_sqlite_directory(url.database)
    else:
        kwargs.update(
            pool_pre_ping=True,
            pool_size=pool_size if pool_size is not None else DEFAULT_POOL_SIZE,
            max_overflow=max_overflow if max_overflow is not None else DEFAULT_MAX_OVERFLOW,
            pool_recycle=3600,
        )
    logger.info("Creating SQL engine for %s", url.render_as_string(hide_password=True))
    return create_async_engine(url, **kwargs)


def _ensure_sqlite_directory(database: str | None) -> None:
    """Create the parent directory of a file-backed SQLite database."""
    if not database or database == ":memory:" or database.startswith("file:"):
        return
    Path(database).expanduser().resolve().parent.mkdir(parents=True, exist_ok=True)
