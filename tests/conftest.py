"""Shared pytest fixtures for the De-Babel test suite.

Provides:
  - MockLLMProvider: records calls, answers with a fixed text or a responder
  - MockModelClient / mock_client_factory: per-key model clients handing
    out MockLLMProviders by model id
  - MockChatStore: in-memory ChatStore with call tracking
  - auth_session / other_session: AuthSession instances for two users

All model and database calls are mocked in every test.
"""

from __future__ import annotations

import asyncio
import uuid
from datetime import datetime, timezone
from typing import Any, AsyncIterator, Callable, Sequence

import pytest

from debabel.core.security import AuthSession, SessionUser
from debabel.models.chat import Chat
from debabel.models.message import Message
from debabel.services.language.registry import get_language_by_code
from debabel.services.llm.base import LLMProvider, LLMResponse, Tool

Responder = Callable[[list[dict[str, Any]], str], str]


# ---------------------------------------------------------------------------
# Mock LLM Provider
# ---------------------------------------------------------------------------


class MockLLMProvider(LLMProvider):
    """Mock LLM provider for testing. Returns configurable responses."""

    def __init__(
        self,
        generate_text: str = "Mock response",
        responder: Responder | None = None,
        fail: bool = False,
        stream_fail_after: int | None = None,
    ) -> None:
        self._generate_text = generate_text
        self._responder = responder
        self._fail = fail
        self._stream_fail_after = stream_fail_after
        self.generate_calls: list[dict[str, Any]] = []
        self.stream_calls: list[dict[str, Any]] = []

    def _answer(self, messages: list[dict[str, Any]], system_prompt: str) -> str:
        if self._responder is not None:
            return self._responder(messages, system_prompt)
        return self._generate_text

    async def generate(
        self,
        messages: list[dict[str, Any]],
        system_prompt: str,
        tools: Sequence[Tool] | None = None,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> LLMResponse:
        self.generate_calls.append(
            {"messages": messages, "system_prompt": system_prompt, "tools": tools}
        )
        if self._fail:
            raise RuntimeError("Mock generate failed")
        return LLMResponse(
            text=self._answer(messages, system_prompt),
            input_tokens=50,
            output_tokens=10,
        )

    async def stream(
        self,
        messages: list[dict[str, Any]],
        system_prompt: str,
        tools: Sequence[Tool] | None = None,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> AsyncIterator[str]:
        self.stream_calls.append(
            {"messages": messages, "system_prompt": system_prompt, "tools": tools}
        )
        if self._fail:
            raise RuntimeError("Mock stream failed")
        for i, word in enumerate(self._answer(messages, system_prompt).split(" ")):
            if self._stream_fail_after is not None and i >= self._stream_fail_after:
                raise RuntimeError("Mock stream interrupted")
            yield word if i == 0 else f" {word}"

    @property
    def call_count(self) -> int:
        return len(self.generate_calls) + len(self.stream_calls)


def target_language_tagger(
    messages: list[dict[str, Any]], system_prompt: str
) -> str:
    """Responder that 'translates' by tagging text with the target language.

    Reads the target language name out of the translator system prompt,
    e.g. "... from French to English." → "[English] <text>".
    """
    header = system_prompt.split("\n", 1)[0]
    target = header.rsplit(" to ", 1)[-1].rstrip(". ")
    return f"[{target}] {messages[-1]['content']}"


def language_name(code: str) -> str:
    language = get_language_by_code(code)
    assert language is not None
    return language.name


# ---------------------------------------------------------------------------
# Mock model client
# ---------------------------------------------------------------------------


class MockModelClient:
    """Stands in for ModelClient: one MockLLMProvider per model id."""

    def __init__(self, api_key: str, providers: dict[str, MockLLMProvider]) -> None:
        self.api_key = api_key
        self._providers = providers
        self.requested: list[str] = []

    def language_model(self, model_id: str) -> MockLLMProvider:
        self.requested.append(model_id)
        return self._providers.setdefault(model_id, MockLLMProvider())


class MockClientFactory:
    """Callable factory recording every credential it was given."""

    def __init__(self, providers: dict[str, MockLLMProvider] | None = None) -> None:
        self.providers: dict[str, MockLLMProvider] = providers or {}
        self.api_keys: list[str] = []

    def __call__(self, api_key: str) -> MockModelClient:
        self.api_keys.append(api_key)
        return MockModelClient(api_key, self.providers)

    def provider(self, model_id: str) -> MockLLMProvider:
        return self.providers.setdefault(model_id, MockLLMProvider())

    @property
    def total_calls(self) -> int:
        return sum(p.call_count for p in self.providers.values())


# ---------------------------------------------------------------------------
# Mock chat store
# ---------------------------------------------------------------------------


class MockChatStore:
    """In-memory ChatStore. save_messages is all-or-nothing."""

    def __init__(self) -> None:
        self.chats: dict[uuid.UUID, Chat] = {}
        self.messages: list[Message] = []
        self.streams: list[tuple[uuid.UUID, uuid.UUID]] = []
        self.saved_batches: list[list[dict[str, Any]]] = []
        self.deleted: list[uuid.UUID] = []

    def add_chat(self, chat_id: uuid.UUID, user_id: uuid.UUID, title: str = "Existing") -> Chat:
        chat = Chat(
            id=chat_id,
            user_id=user_id,
            title=title,
            visibility="private",
            created_at=datetime.now(timezone.utc),
        )
        self.chats[chat_id] = chat
        return chat

    def add_message(
        self, chat_id: uuid.UUID, role: str, text: str, created_at: datetime | None = None
    ) -> Message:
        row = Message(
            id=uuid.uuid4(),
            chat_id=chat_id,
            role=role,
            parts=[{"type": "text", "text": text}],
            attachments=[],
            created_at=created_at or datetime.now(timezone.utc),
        )
        self.messages.append(row)
        return row

    async def get_chat_by_id(self, chat_id: uuid.UUID) -> Chat | None:
        return self.chats.get(chat_id)

    async def save_chat(
        self, chat_id: uuid.UUID, user_id: uuid.UUID, title: str, visibility: str
    ) -> Chat:
        chat = Chat(id=chat_id, user_id=user_id, title=title, visibility=visibility)
        self.chats[chat_id] = chat
        return chat

    async def get_messages_by_chat_id(self, chat_id: uuid.UUID) -> list[Message]:
        return sorted(
            (m for m in self.messages if m.chat_id == chat_id),
            key=lambda m: m.created_at,
        )

    async def save_messages(self, messages: list[dict[str, Any]]) -> None:
        rows = [Message(**m) for m in messages]
        self.saved_batches.append(messages)
        self.messages.extend(rows)

    async def create_stream_id(self, stream_id: uuid.UUID, chat_id: uuid.UUID) -> None:
        self.streams.append((stream_id, chat_id))

    async def delete_chat_by_id(self, chat_id: uuid.UUID, user_id: uuid.UUID) -> Chat | None:
        chat = self.chats.get(chat_id)
        if chat is None or chat.user_id != user_id:
            return None
        del self.chats[chat_id]
        self.messages = [m for m in self.messages if m.chat_id != chat_id]
        self.deleted.append(chat_id)
        return chat


async def collect(stream: AsyncIterator[str]) -> list[str]:
    return [chunk async for chunk in stream]


async def delayed(value: Any, seconds: float) -> Any:
    await asyncio.sleep(seconds)
    return value


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_llm() -> MockLLMProvider:
    """Mock LLM provider fixture."""
    return MockLLMProvider()


@pytest.fixture
def translating_llm() -> MockLLMProvider:
    """Mock provider whose output is tagged with the target language."""
    return MockLLMProvider(responder=target_language_tagger)


@pytest.fixture
def mock_store() -> MockChatStore:
    return MockChatStore()


@pytest.fixture
def client_factory() -> MockClientFactory:
    return MockClientFactory()


@pytest.fixture
def user_id() -> uuid.UUID:
    """Fixed user UUID for testing."""
    return uuid.UUID("00000000-0000-0000-0000-000000000001")


@pytest.fixture
def auth_session(user_id: uuid.UUID) -> AuthSession:
    return AuthSession(user=SessionUser(id=user_id))


@pytest.fixture
def other_session() -> AuthSession:
    return AuthSession(
        user=SessionUser(id=uuid.UUID("00000000-0000-0000-0000-000000000009"))
    )


@pytest.fixture
def chat_id() -> uuid.UUID:
    """Fixed chat UUID for testing."""
    return uuid.UUID("00000000-0000-0000-0000-0000000000c1")


@pytest.fixture
def api_key() -> str:
    return "sk-test_key-123"
