"""Shared fixtures for API tests."""
from collections.abc import AsyncGenerator, Callable

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from api.main import app
from core.auth import create_access_token
from core.config import Settings, get_settings
from db.session import get_async_session

TEST_SECRET = "test-secret-key-with-at-least-32-bytes!"


def auth_settings() -> Settings:
    """Settings with authentication enforced."""
    return Settings(
        database_url="sqlite+aiosqlite://",
        dev_mode=False,
        jwt_secret_key=TEST_SECRET,
    )


@pytest.fixture
def mint_token() -> Callable[..., str]:
    """Mint tokens that the `auth_client` app accepts."""
    def _mint(subject: str = "operator@example.com", **kwargs) -> str:
        return create_access_token(subject, auth_settings(), **kwargs)
    return _mint


@pytest.fixture
async def auth_client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient]:
    """
    Client for an app with DEV_MODE off, so every request needs a bearer token.

    Overrides get_settings so tokens minted with `auth_settings()` verify.
    """
    async def override_get_async_session() -> AsyncGenerator[AsyncSession]:
        yield db_session

    app.dependency_overrides[get_async_session] = override_get_async_session
    app.dependency_overrides[get_settings] = auth_settings

    try:
        async with AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://test",
        ) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()
