"""Database connection and session management."""

from typing import Any

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from poster_attribution.config import settings
from poster_attribution.models import Base


def _enable_sqlite_savepoints(engine: AsyncEngine) -> None:
    """Let SQLite honour SAVEPOINT by emitting BEGIN ourselves.

    The sqlite3 driver otherwise manages transactions on its own and
    nested transactions silently stop being rolled back independently.

    Transactions begin IMMEDIATE: a second writer waits for the first to
    commit and then sees its rows, instead of failing with "database is
    locked" when it tries to upgrade a read lock.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection: Any, connection_record: Any) -> None:
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn: Any) -> None:
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def build_engine(url: str | None = None, *, echo: bool | None = None, **kwargs: Any) -> AsyncEngine:
    """Create an async engine, applying backend-specific setup."""
    url = url or settings.database_url
    new_engine = create_async_engine(
        url,
        echo=settings.database_echo if echo is None else echo,
        **kwargs,
    )
    if new_engine.dialect.name == "sqlite":
        _enable_sqlite_savepoints(new_engine)
    return new_engine


def build_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind,
        class_=AsyncSession,
        expire_on_commit=False,
    )


engine = build_engine()

async_session_factory = build_session_factory(engine)


async def init_db(bind: AsyncEngine | None = None) -> None:
    """Initialize database tables."""
    async with (bind or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
