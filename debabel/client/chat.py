"""HTTP client for the chat API.

Language preferences and the API key are read from storage on every send,
never taken from a cached snapshot, so a change made just before sending
is always honoured.
"""

from __future__ import annotations

from typing import Any, AsyncIterator
from uuid import UUID, uuid4

import httpx
import structlog

from debabel.client.api_key import ApiKeyStorage
from debabel.client.preferences import read_language_preferences
from debabel.client.storage import KeyValueStorage

logger = structlog.get_logger(__name__)


class ChatClientError(Exception):
    """An error envelope returned by the chat API."""

    def __init__(self, code: str, message: str, status_code: int) -> None:
        self.code = code
        self.message = message
        self.status_code = status_code
        super().__init__(f"{code}: {message}")

    @classmethod
    def from_response(cls, response: httpx.Response) -> ChatClientError:
        try:
            payload = response.json()
        except ValueError:
            payload = {}
        return cls(
            code=payload.get("code", "unknown"),
            message=payload.get("message", response.text),
            status_code=response.status_code,
        )


class ChatClient:
    """Async client: send a message and iterate the streamed answer."""

    def __init__(
        self,
        base_url: str,
        storage: KeyValueStorage,
        session_token: str | None = None,
        http: httpx.AsyncClient | None = None,
        timeout: float = 120.0,
    ) -> None:
        self._storage = storage
        self._session_token = session_token
        self._http = http or httpx.AsyncClient(base_url=base_url, timeout=timeout)

    async def __aenter__(self) -> ChatClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    def _headers(self) -> dict[str, str]:
        headers: dict[str, str] = {}
        if self._session_token:
            headers["Authorization"] = f"Bearer {self._session_token}"
        return headers

    async def send_message(
        self,
        chat_id: UUID,
        text: str,
        selected_chat_model: str = "chat-model",
        visibility: str = "private",
        message_id: UUID | None = None,
    ) -> AsyncIterator[str]:
        """POST one user message and yield the answer text as it streams in.

        Raises:
            ChatClientError: The API answered with an error envelope.
        """
        preferences = read_language_preferences(self._storage)
        api_key = ApiKeyStorage(self._storage).get() or ""
        body = {
            "id": str(chat_id),
            "message": {
                "id": str(message_id or uuid4()),
                "role": "user",
                "parts": [{"type": "text", "text": text}],
            },
            "selectedChatModel": selected_chat_model,
            "selectedVisibilityType": visibility,
            "inputLanguage": preferences.input_language,
            "searchLanguage": preferences.search_language,
        }
        headers = {**self._headers(), "x-api-key": api_key}
        logger.debug(
            "chat_send",
            chat_id=str(chat_id),
            input_language=preferences.input_language,
            search_language=preferences.search_language,
        )

        async with self._http.stream(
            "POST", "/v1/chat", json=body, headers=headers
        ) as response:
            if response.is_error:
                await response.aread()
                raise ChatClientError.from_response(response)
            async for chunk in response.aiter_text():
                if chunk:
                    yield chunk

    async def delete_chat(self, chat_id: UUID) -> dict[str, Any]:
        response = await self._http.delete(
            "/v1/chat", params={"id": str(chat_id)}, headers=self._headers()
        )
        if response.is_error:
            raise ChatClientError.from_response(response)
        return response.json()

    async def list_languages(self) -> list[dict[str, Any]]:
        response = await self._http.get("/v1/languages")
        if response.is_error:
            raise ChatClientError.from_response(response)
        return response.json()["languages"]
