"""Async SQLAlchemy session factory."""
from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from core.config import Settings, get_settings


def configure_sqlite_engine(engine: AsyncEngine) -> None:
    """
    Make SQLite honour foreign keys and SAVEPOINTs.

    The sqlite3 driver manages transactions itself and defers BEGIN, which breaks
    session.begin_nested(). Take over transaction control so that BEGIN and
    SAVEPOINT are emitted exactly when SQLAlchemy asks for them.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection: Any, _connection_record: Any) -> None:
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn: Any) -> None:
        conn.exec_driver_sql("BEGIN")


def build_engine(settings: Settings, **kwargs: Any) -> AsyncEngine:
    """Create the async engine for the configured database."""
    if settings.is_sqlite:
        engine = create_async_engine(settings.database_url, echo=False, **kwargs)
        configure_sqlite_engine(engine)
        return engine
    return create_async_engine(
        settings.database_url,
        echo=False,
        pool_pre_ping=True,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        **kwargs,
    )


settings = get_settings()

engine = build_engine(settings)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_async_session() -> AsyncGenerator[AsyncSession]:
    """
    Yield an async database session.

    Uses unit-of-work pattern: services use flush() for refreshing objects,
    commit happens once here at request end. This ensures atomic transactions
    per request - if anything fails, all changes are rolled back.
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
