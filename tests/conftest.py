"""Pytest fixtures for testing."""
import os
from collections.abc import AsyncGenerator
from datetime import date

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

# Must be set before any app imports that trigger Settings validation
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["DEV_MODE"] = "true"

from db.session import configure_sqlite_engine  # noqa: E402
from models.actor import Actor  # noqa: E402
from models.base import Base  # noqa: E402
from models.genre import Genre  # noqa: E402
from models.movie import Movie  # noqa: E402


@pytest.fixture
async def async_engine() -> AsyncGenerator[AsyncEngine]:
    """
    Create a fresh in-memory database for each test.

    StaticPool keeps the single connection (and so the database) alive for the
    lifetime of the engine.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        echo=False,
        poolclass=StaticPool,
    )
    configure_sqlite_engine(engine)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
async def db_session(async_engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Create an async session on the test database. Never committed."""
    session_factory = async_sessionmaker(
        bind=async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
async def client(
    db_session: AsyncSession,
) -> AsyncGenerator[AsyncClient]:
    """Create a test client with database session override."""
    # Clear the settings cache so it picks up DATABASE_URL from environment
    from core.config import get_settings

    get_settings.cache_clear()

    from api.main import app
    from db.session import get_async_session

    async def override_get_async_session() -> AsyncGenerator[AsyncSession]:
        yield db_session

    app.dependency_overrides[get_async_session] = override_get_async_session

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# =============================================================================
# Entity fixtures
# =============================================================================


@pytest.fixture
async def movie(db_session: AsyncSession) -> Movie:
    """A movie with no actors or genres."""
    movie = Movie(title="Heat", release_year=1995, duration_minutes=170, actors=[], genres=[])
    db_session.add(movie)
    await db_session.flush()
    await db_session.refresh(movie, attribute_names=["actors", "genres"])
    return movie


@pytest.fixture
async def other_movie(db_session: AsyncSession) -> Movie:
    movie = Movie(title="Ronin", release_year=1998, duration_minutes=122, actors=[], genres=[])
    db_session.add(movie)
    await db_session.flush()
    await db_session.refresh(movie, attribute_names=["actors", "genres"])
    return movie


@pytest.fixture
async def actors(db_session: AsyncSession) -> list[Actor]:
    """Three actors with no movies."""
    created = [
        Actor(name="Al Pacino", birth_date=date(1940, 4, 25), movies=[]),
        Actor(name="Robert De Niro", birth_date=date(1943, 8, 17), movies=[]),
        Actor(name="Val Kilmer", birth_date=date(1959, 12, 31), movies=[]),
    ]
    db_session.add_all(created)
    await db_session.flush()
    for actor in created:
        await db_session.refresh(actor, attribute_names=["movies"])
    return created


@pytest.fixture
async def genres(db_session: AsyncSession) -> list[Genre]:
    """Two genres with no movies."""
    created = [Genre(name="Crime", movies=[]), Genre(name="Thriller", movies=[])]
    db_session.add_all(created)
    await db_session.flush()
    for genre in created:
        await db_session.refresh(genre, attribute_names=["movies"])
    return created
