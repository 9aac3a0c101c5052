"""Per-request model client.

Every request brings its own OpenAI key in the ``x-api-key`` header. A
ModelClient is built from that key for the lifetime of one request and
hands out providers by model id. No key is held in process-wide state.
"""

from typing import Callable

from openai import AsyncOpenAI

from debabel.core.config import settings
from debabel.services.llm.base import LLMProvider
from debabel.services.llm.openai_provider import OpenAIProvider

CHAT_MODEL = "chat-model"
REASONING_MODEL = "chat-model-reasoning"
TITLE_MODEL = "title-model"
TRANSLATION_MODEL = "translation-model"


class ModelClient:
    """Capability-scoped handle over one caller's credential."""

    def __init__(self, api_key: str, base_url: str | None = None) -> None:
        self._client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url or settings.openai_base_url,
            timeout=settings.llm_timeout_seconds,
        )
        self._models: dict[str, Callable[[], LLMProvider]] = {
            CHAT_MODEL: lambda: OpenAIProvider(self._client, settings.chat_model),
            REASONING_MODEL: lambda: OpenAIProvider(
                self._client, settings.reasoning_model, reasoning_tag="think"
            ),
            TITLE_MODEL: lambda: OpenAIProvider(self._client, settings.title_model),
            TRANSLATION_MODEL: lambda: OpenAIProvider(
                self._client, settings.translation_model
            ),
        }

    def language_model(self, model_id: str) -> LLMProvider:
        try:
            return self._models[model_id]()
        except KeyError:
            raise ValueError(f"Unknown model id: {model_id}") from None

    def __repr__(self) -> str:
        return f"ModelClient(models={sorted(self._models)})"


ModelClientFactory = Callable[[str], ModelClient]


def make_model_client(api_key: str) -> ModelClient:
    """Build a ModelClient scoped to the caller's credential."""
    return ModelClient(api_key)
