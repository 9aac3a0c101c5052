"""Unit tests for session tokens and the error envelope.

Tests:
  - session tokens round-trip to an AuthSession
  - expired, tampered or malformed tokens resolve to no session
  - auth() reads the bearer header first, then the session cookie
  - ChatError derives status and message from the code's type
"""

from __future__ import annotations

import uuid
from datetime import timedelta

import pytest
from starlette.requests import Request

from debabel.core import security
from debabel.core.config import settings
from debabel.core.exceptions import (
    BadRequestError,
    ChatError,
    ForbiddenError,
    UnauthorizedError,
)
from debabel.core.security import (
    AuthSession,
    SessionUser,
    auth,
    create_jwt_token,
    create_session_token,
    session_from_token,
)


@pytest.fixture(autouse=True)
def jwt_secret(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(settings, "jwt_secret_key", "test-secret")


def _request(headers: dict[str, str]) -> Request:
    return Request(
        {
            "type": "http",
            "method": "POST",
            "path": "/v1/chat",
            "headers": [(k.lower().encode(), v.encode()) for k, v in headers.items()],
        }
    )


class TestSessionTokens:
    def test_round_trip(self, user_id: uuid.UUID) -> None:
        token = create_session_token(user_id)
        assert session_from_token(token) == AuthSession(user=SessionUser(id=user_id))

    def test_missing_token(self) -> None:
        assert session_from_token(None) is None
        assert session_from_token("") is None

    def test_expired_token(self, user_id: uuid.UUID) -> None:
        token = create_session_token(user_id, expires_delta=timedelta(seconds=-5))
        assert session_from_token(token) is None

    def test_wrong_secret(self, user_id: uuid.UUID, monkeypatch: pytest.MonkeyPatch) -> None:
        token = create_session_token(user_id)
        monkeypatch.setattr(settings, "jwt_secret_key", "another-secret")
        assert session_from_token(token) is None

    def test_token_without_subject(self) -> None:
        assert session_from_token(create_jwt_token({"role": "user"})) is None

    def test_subject_not_a_uuid(self) -> None:
        assert session_from_token(create_jwt_token({"sub": "alice"})) is None


class TestAuth:
    @pytest.mark.asyncio
    async def test_bearer_header(self, user_id: uuid.UUID) -> None:
        request = _request({"Authorization": f"Bearer {create_session_token(user_id)}"})
        session = await auth(request)
        assert session is not None
        assert session.user.id == user_id

    @pytest.mark.asyncio
    async def test_cookie(self, user_id: uuid.UUID) -> None:
        token = create_session_token(user_id)
        request = _request({"Cookie": f"{settings.session_cookie_name}={token}"})
        session = await auth(request)
        assert session is not None
        assert session.user.id == user_id

    @pytest.mark.asyncio
    async def test_no_credentials(self) -> None:
        assert await auth(_request({})) is None

    def test_api_key_header_is_not_a_session(self) -> None:
        request = _request({"x-api-key": "sk-abc"})
        assert security._extract_token(request) is None


class TestChatError:
    @pytest.mark.parametrize(
        "exc,code,status",
        [
            (BadRequestError(), "bad_request:api", 400),
            (UnauthorizedError(), "unauthorized:chat", 401),
            (ForbiddenError(), "forbidden:chat", 403),
        ],
    )
    def test_typed_errors(self, exc: ChatError, code: str, status: int) -> None:
        assert exc.code == code
        assert exc.status_code == status
        assert exc.to_dict() == {"code": code, "message": exc.message}
        assert exc.message

    def test_custom_message(self) -> None:
        assert BadRequestError("Bad id").to_dict() == {
            "code": "bad_request:api",
            "message": "Bad id",
        }

    def test_unknown_type_is_server_error(self) -> None:
        err = ChatError("offline:chat")
        assert err.status_code == 500
        assert err.message.startswith("Something went wrong")
