"""LLM-backed translation between registry languages.

Three entry points share one policy:

1. Same source and target language: the input comes back untouched and the
   model is never called.
2. Otherwise the translation model is asked for the translated text only.
3. Any provider failure degrades to the original text. Translation must
   never block the chat flow, so nothing here raises on provider errors.

The service is bound to one provider, which in turn is bound to one
caller's credential. The module-level helpers build that provider from a
TranslationRequest / api key for callers that only hold a credential.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import AsyncIterator

import structlog

from debabel.schemas.chat import ChatMessage, MessagePart
from debabel.services.language.registry import get_language_name
from debabel.services.llm.base import LLMProvider, prompt_messages
from debabel.services.llm.factory import (
    TRANSLATION_MODEL,
    ModelClientFactory,
    make_model_client,
)

logger = structlog.get_logger(__name__)

_SYSTEM_PROMPT_TEMPLATE = """You are a professional translator. Translate the given text from {source} to {target}.

Rules:
- Preserve the original meaning and context
- Maintain the tone and style of the original text
- Keep technical terms and proper nouns when appropriate
- Return ONLY the translated text without any explanations or additional content
- If the text is already in the target language, return it as is"""


@dataclass(frozen=True)
class TranslationRequest:
    """A single translation job. Lives for one call, never persisted."""

    text: str
    from_language: str
    to_language: str
    api_key: str = field(repr=False)


def build_system_prompt(from_language: str, to_language: str) -> str:
    return _SYSTEM_PROMPT_TEMPLATE.format(
        source=get_language_name(from_language),
        target=get_language_name(to_language),
    )


def _needs_translation(text: str, from_language: str, to_language: str) -> bool:
    return from_language != to_language and bool(text.strip())


class TranslationService:
    """Translates text and UI messages with a single translation model."""

    def __init__(self, llm: LLMProvider) -> None:
        self._llm = llm

    @classmethod
    def for_api_key(
        cls,
        api_key: str,
        client_factory: ModelClientFactory | None = None,
    ) -> TranslationService:
        factory = client_factory or make_model_client
        return cls(factory(api_key).language_model(TRANSLATION_MODEL))

    async def translate_text(
        self, text: str, from_language: str, to_language: str
    ) -> str:
        """Translate text in one call; returns the original text on failure."""
        if not _needs_translation(text, from_language, to_language):
            logger.debug(
                "translation_skipped",
                from_language=from_language,
                to_language=to_language,
            )
            return text

        logger.info(
            "translation_started",
            from_language=from_language,
            to_language=to_language,
            text_len=len(text),
        )
        try:
            response = await self._llm.generate(
                prompt_messages(text),
                system_prompt=build_system_prompt(from_language, to_language),
            )
        except Exception as e:
            logger.warning(
                "translation_failed_fallback",
                from_language=from_language,
                to_language=to_language,
                error=str(e),
            )
            return text

        translated = response.text.strip()
        logger.info(
            "translation_completed",
            original_len=len(text),
            translated_len=len(translated),
        )
        return translated

    async def stream_translate_text(
        self, text: str, from_language: str, to_language: str
    ) -> AsyncIterator[str]:
        """Translate text incrementally, yielding chunks as the model emits them.

        If the provider fails before producing anything, the original text is
        yielded as a single chunk. A failure after partial output ends the
        stream; chunks already handed to the consumer cannot be taken back.
        """
        if not _needs_translation(text, from_language, to_language):
            yield text
            return

        logger.info(
            "stream_translation_started",
            from_language=from_language,
            to_language=to_language,
            text_len=len(text),
        )
        emitted = 0
        try:
            async for chunk in self._llm.stream(
                prompt_messages(text),
                system_prompt=build_system_prompt(from_language, to_language),
            ):
                emitted += 1
                yield chunk
        except Exception as e:
            if emitted:
                logger.warning(
                    "stream_translation_interrupted",
                    chunks_emitted=emitted,
                    error=str(e),
                )
                return
            logger.warning(
                "translation_failed_fallback",
                from_language=from_language,
                to_language=to_language,
                error=str(e),
            )
            yield text
            return

        logger.info("stream_translation_completed", chunks_emitted=emitted)

    async def translate_message(
        self, message: ChatMessage, from_language: str, to_language: str
    ) -> ChatMessage:
        """Return a new message whose text parts are translated.

        Non-text parts, id, role and metadata are carried over unchanged and
        part order is preserved. The input message is never mutated.
        """
        if from_language == to_language:
            return message.model_copy(update={"parts": list(message.parts)})

        parts = await asyncio.gather(
            *(self._translate_part(p, from_language, to_language) for p in message.parts)
        )
        logger.debug(
            "message_translated",
            message_id=str(message.id),
            role=message.role,
            parts=len(parts),
        )
        return message.model_copy(update={"parts": list(parts)})

    async def _translate_part(
        self, part: MessagePart, from_language: str, to_language: str
    ) -> MessagePart:
        if part.type != "text" or not part.text:
            return part
        translated = await self.translate_text(part.text, from_language, to_language)
        return part.model_copy(update={"text": translated})


async def translate_text(request: TranslationRequest) -> str:
    service = TranslationService.for_api_key(request.api_key)
    return await service.translate_text(
        request.text, request.from_language, request.to_language
    )


def stream_translate_text(request: TranslationRequest) -> AsyncIterator[str]:
    service = TranslationService.for_api_key(request.api_key)
    return service.stream_translate_text(
        request.text, request.from_language, request.to_language
    )


async def translate_message(
    message: ChatMessage, from_language: str, to_language: str, api_key: str
) -> ChatMessage:
    service = TranslationService.for_api_key(api_key)
    return await service.translate_message(message, from_language, to_language)
