"""Tests for bearer-token creation and validation."""
from datetime import timedelta

import jwt
import pytest
from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials

from core.auth import DEV_USER, create_access_token, decode_jwt, get_current_user
from core.config import Settings

SECRET = "unit-test-secret-key-of-sufficient-length"


def _settings(**overrides) -> Settings:
    values = {"_env_file": None, "DEV_MODE": "false", "jwt_secret_key": SECRET} | overrides
    return Settings(**values)


def _bearer(token: str) -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


# =============================================================================
# create_access_token / decode_jwt
# =============================================================================


def test__create_access_token__round_trips_subject() -> None:
    settings = _settings()
    token = create_access_token("ops", settings)

    payload = decode_jwt(token, settings)
    assert payload["sub"] == "ops"
    assert payload["exp"] > payload["iat"]


def test__create_access_token__requires_secret() -> None:
    with pytest.raises(ValueError, match="JWT_SECRET_KEY"):
        create_access_token("ops", _settings(jwt_secret_key=""))


def test__decode_jwt__no_secret_configured() -> None:
    token = create_access_token("ops", _settings())

    with pytest.raises(HTTPException) as exc_info:
        decode_jwt(token, _settings(jwt_secret_key=""))
    assert exc_info.value.status_code == 503


def test__decode_jwt__wrong_signature() -> None:
    token = create_access_token("ops", _settings(jwt_secret_key="another-secret-of-enough-length!!"))

    with pytest.raises(HTTPException) as exc_info:
        decode_jwt(token, _settings())
    assert exc_info.value.status_code == 401
    assert exc_info.value.detail == "Invalid token"


def test__decode_jwt__audience() -> None:
    settings = _settings(jwt_audience="movie-catalog")
    token = create_access_token("ops", settings)
    assert decode_jwt(token, settings)["aud"] == "movie-catalog"

    other = create_access_token("ops", _settings(jwt_audience="someone-else"))
    with pytest.raises(HTTPException) as exc_info:
        decode_jwt(other, settings)
    assert exc_info.value.detail == "Invalid audience"


def test__decode_jwt__missing_sub() -> None:
    token = jwt.encode({"exp": 9999999999}, SECRET, algorithm="HS256")

    with pytest.raises(HTTPException) as exc_info:
        decode_jwt(token, _settings())
    assert exc_info.value.status_code == 401


def test__decode_jwt__expired() -> None:
    settings = _settings()
    token = create_access_token("ops", settings, expires_delta=timedelta(seconds=-1))

    with pytest.raises(HTTPException) as exc_info:
        decode_jwt(token, settings)
    assert exc_info.value.detail == "Token has expired"


# =============================================================================
# get_current_user
# =============================================================================


async def test__get_current_user__dev_mode_bypass() -> None:
    settings = Settings(_env_file=None, database_url="sqlite+aiosqlite://", DEV_MODE="true")
    assert await get_current_user(credentials=None, settings=settings) == DEV_USER


async def test__get_current_user__missing_credentials() -> None:
    with pytest.raises(HTTPException) as exc_info:
        await get_current_user(credentials=None, settings=_settings())
    assert exc_info.value.status_code == 401
    assert exc_info.value.headers == {"WWW-Authenticate": "Bearer"}


async def test__get_current_user__returns_subject() -> None:
    settings = _settings()
    token = create_access_token("curator@example.com", settings)

    user = await get_current_user(credentials=_bearer(token), settings=settings)
    assert user == "curator@example.com"
