"""Authentication module for bearer-token (JWT) validation."""
import logging
from datetime import UTC, datetime, timedelta

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from core.config import Settings, get_settings

logger = logging.getLogger(__name__)


# HTTP Bearer token scheme
security = HTTPBearer(auto_error=False)

DEV_USER = "dev|local-development-user"


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def create_access_token(
    subject: str,
    settings: Settings,
    expires_delta: timedelta | None = None,
) -> str:
    """
    Mint a signed access token for `subject`.

    There is no login endpoint; operators mint tokens with this helper.
    """
    if not settings.jwt_secret_key:
        raise ValueError("JWT_SECRET_KEY must be set to create access tokens")
    now = datetime.now(UTC)
    expires = now + (expires_delta or timedelta(minutes=settings.access_token_expire_minutes))
    claims: dict = {"sub": subject, "iat": now, "exp": expires}
    if settings.jwt_audience:
        claims["aud"] = settings.jwt_audience
    return jwt.encode(claims, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_jwt(token: str, settings: Settings) -> dict:
    """
    Decode and validate a bearer token.

    Raises:
        HTTPException: If token is invalid, expired, or has the wrong audience.
    """
    if not settings.jwt_secret_key:
        logger.error("JWT_SECRET_KEY is not configured; rejecting bearer token")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Could not validate credentials",
        )
    try:
        return jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
            options={"require": ["sub", "exp"]},
        )
    except jwt.ExpiredSignatureError:
        raise _unauthorized("Token has expired")
    except jwt.InvalidAudienceError:
        raise _unauthorized("Invalid audience")
    except jwt.PyJWTError as e:
        # Log full details for debugging (server-side only)
        logger.warning("JWT validation failed: %s", e, exc_info=True)
        raise _unauthorized("Invalid token")


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    settings: Settings = Depends(get_settings),
) -> str:
    """
    Return the caller identity (the token's `sub` claim).

    In DEV_MODE authentication is bypassed and a fixed development identity is used.
    """
    if settings.dev_mode:
        return DEV_USER

    if credentials is None:
        raise _unauthorized("Not authenticated")

    payload = decode_jwt(credentials.credentials, settings)
    return str(payload["sub"])
