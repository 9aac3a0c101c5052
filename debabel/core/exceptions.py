"""Custom exception classes for structured error handling.

Error codes follow the ``<type>:<surface>`` convention, e.g. ``forbidden:chat``.
The HTTP status is derived from the type half of the code.
"""

from typing import Any

_STATUS_BY_TYPE = {
    "bad_request": 400,
    "unauthorized": 401,
    "forbidden": 403,
    "not_found": 404,
}

_MESSAGES = {
    "bad_request": "The request couldn't be processed. Please check your input and try again.",
    "unauthorized": "You need to sign in to view this chat. Please sign in and try again.",
    "forbidden": "This chat belongs to another user. Please check the chat ID and try again.",
    "not_found": "The requested chat was not found. Please check the chat ID and try again.",
}


class ChatError(Exception):
    """Base exception for all chat API errors."""

    def __init__(
        self,
        code: str,
        message: str | None = None,
        status_code: int | None = None,
    ) -> None:
        error_type = code.split(":", 1)[0]
        self.code = code
        self.message = message or _MESSAGES.get(
            error_type, "Something went wrong. Please try again later."
        )
        self.status_code = status_code or _STATUS_BY_TYPE.get(error_type, 500)
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message}


class BadRequestError(ChatError):
    def __init__(self, message: str | None = None) -> None:
        super().__init__(code="bad_request:api", message=message)


class UnauthorizedError(ChatError):
    def __init__(self, message: str | None = None) -> None:
        super().__init__(code="unauthorized:chat", message=message)


class ForbiddenError(ChatError):
    def __init__(self, message: str | None = None) -> None:
        super().__init__(code="forbidden:chat", message=message)


class DatabaseError(ChatError):
    def __init__(self, message: str | None = None) -> None:
        super().__init__(
            code="bad_request:database",
            message=message or "An error occurred while executing a database query.",
        )
