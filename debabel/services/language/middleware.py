"""Language mediation around the chat model call.

IMPORTANT: Every user message in the history MUST pass through
translate_history before reaching the model, and every model response MUST
be delivered through translate_response. Both are no-ops when the input
and search languages match, so callers never branch on language themselves.
"""

import asyncio
from typing import AsyncIterator

import structlog

from debabel.schemas.chat import ChatMessage
from debabel.services.language.translation import TranslationService

logger = structlog.get_logger(__name__)


async def single_chunk(text: str) -> AsyncIterator[str]:
    """A finished text as a one-chunk stream."""
    yield text


class LanguageMiddleware:
    """Inbound and outbound translation for one chat request."""

    def __init__(self, translator: TranslationService) -> None:
        self._translator = translator

    async def translate_history(
        self,
        messages: list[ChatMessage],
        input_language: str,
        search_language: str,
    ) -> list[ChatMessage]:
        """Translate all user messages to the search language.

        Translations run concurrently; the result keeps the input order no
        matter which translation finishes first. Assistant and system
        messages are already in the search language and pass through.
        The full history is re-translated on every turn.
        """
        if input_language == search_language:
            logger.debug("history_translation_skipped", message_count=len(messages))
            return list(messages)

        async def _translate(message: ChatMessage) -> ChatMessage:
            if message.role != "user":
                return message
            return await self._translator.translate_message(
                message, input_language, search_language
            )

        translated = await asyncio.gather(*(_translate(m) for m in messages))
        logger.info(
            "history_translated",
            message_count=len(messages),
            from_language=input_language,
            to_language=search_language,
        )
        return list(translated)

    def translate_response(
        self,
        text: str,
        search_language: str,
        input_language: str,
    ) -> AsyncIterator[str]:
        """Stream the model's answer back in the user's input language."""
        if search_language == input_language:
            return single_chunk(text)
        return self._translator.stream_translate_text(
            text, search_language, input_language
        )
