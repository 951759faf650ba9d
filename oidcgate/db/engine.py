"""Async SQLAlchemy engine and session factory construction."""

from pathlib import Path

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from oidcgate.core.settings import DatabaseSettings
from oidcgate.db.base import BaseEntity


def _ensure_sqlite_dir(url: str) -> None:
    """Create the parent directory of a file-backed SQLite database."""
    parsed = make_url(url)
    if not parsed.get_backend_name().startswith("sqlite"):
        return
    if parsed.database and parsed.database != ":memory:":
        Path(parsed.database).parent.mkdir(parents=True, exist_ok=True)


def create_engine(db: DatabaseSettings) -> AsyncEngine:
    """Build the async engine described by the settings."""
    _ensure_sqlite_dir(db.url)
    return create_async_engine(db.url, echo=db.echo)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def create_schema(engine: AsyncEngine) -> None:
    """Create any missing tables."""
    async with engine.begin() as conn:
        await conn.run_sync(BaseEntity.metadata.create_all)
