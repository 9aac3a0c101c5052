"""Session JWT utilities and the ``auth()`` session lookup.

Sessions are carried by a signed JWT, either as ``Authorization: Bearer``
or in the session cookie. The model credential (``x-api-key``) is a
separate, per-request value and is never part of the session.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any
from uuid import UUID

import structlog
from fastapi import Request
from jose import JWTError, jwt

from debabel.core.config import settings

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class SessionUser:
    id: UUID


@dataclass(frozen=True)
class AuthSession:
    """Authenticated session as seen by the chat pipeline."""

    user: SessionUser


def create_jwt_token(
    data: dict[str, Any],
    expires_delta: timedelta | None = None,
) -> str:
    """Create a JWT token with optional expiry."""
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(hours=24))
    to_encode.update({"exp": expire})
    return jwt.encode(
        to_encode,
        settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
    )


def decode_jwt_token(token: str) -> dict[str, Any]:
    """Decode and validate a JWT token. Raises JWTError on failure."""
    return jwt.decode(
        token,
        settings.jwt_secret_key,
        algorithms=[settings.jwt_algorithm],
    )


def create_session_token(user_id: UUID, expires_delta: timedelta | None = None) -> str:
    """Issue a session token for the given user id."""
    return create_jwt_token({"sub": str(user_id)}, expires_delta)


def session_from_token(token: str | None) -> AuthSession | None:
    """Resolve a session token into an AuthSession, or None if invalid."""
    if not token:
        return None
    try:
        claims = decode_jwt_token(token)
        return AuthSession(user=SessionUser(id=UUID(claims["sub"])))
    except (JWTError, KeyError, ValueError) as e:
        logger.info("session_token_rejected", error=str(e))
        return None


def _extract_token(request: Request) -> str | None:
    authorization = request.headers.get("authorization", "")
    scheme, _, credentials = authorization.partition(" ")
    if scheme.lower() == "bearer" and credentials:
        return credentials.strip()
    return request.cookies.get(settings.session_cookie_name)


async def auth(request: Request) -> AuthSession | None:
    """Return the authenticated session for this request, if any."""
    return session_from_token(_extract_token(request))
