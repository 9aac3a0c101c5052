"""Chat mediation pipeline: one inbound message in, one streamed answer out.

Stages, in order, none retried:
  1. Authenticate: caller key and session must both be present
  2. Resolve chat: create it (with a generated title) or check ownership
  3. Assemble: stored history + the new message
  4. Translate in: user messages to the search language
  5. Generate: one completion call with the per-request client
  6. Persist: original user message + assistant answer, one batch
  7. Translate out: answer streamed back in the input language

Translation never fails a request (see TranslationService). Everything
else propagates; the API layer maps unexpected errors to bad_request.
"""

from __future__ import annotations

from typing import AsyncIterator, Sequence
from uuid import UUID, uuid4

import structlog

from debabel.core.exceptions import ForbiddenError, UnauthorizedError
from debabel.core.security import AuthSession
from debabel.db.queries import ChatStore
from debabel.models.chat import Chat
from debabel.schemas.chat import ChatMessage, MessagePart, PostRequestBody
from debabel.services.chat.messages import (
    convert_to_model_messages,
    convert_to_ui_messages,
    to_message_row,
)
from debabel.services.chat.prompts import RequestHints, system_prompt
from debabel.services.chat.title import generate_title_from_user_message
from debabel.services.chat.tools import CHAT_TOOLS
from debabel.services.language.middleware import LanguageMiddleware
from debabel.services.language.translation import TranslationService
from debabel.services.llm.base import Tool
from debabel.services.llm.factory import (
    TITLE_MODEL,
    TRANSLATION_MODEL,
    ModelClient,
    ModelClientFactory,
    make_model_client,
)

logger = structlog.get_logger(__name__)


class ChatPipeline:
    """Runs the chat stages for one request."""

    def __init__(
        self,
        store: ChatStore,
        client_factory: ModelClientFactory = make_model_client,
        tools: Sequence[Tool] = CHAT_TOOLS,
    ) -> None:
        self._store = store
        self._client_factory = client_factory
        self._tools = tuple(tools)

    async def handle(
        self,
        body: PostRequestBody,
        api_key: str | None,
        session: AuthSession | None,
        hints: RequestHints,
    ) -> AsyncIterator[str]:
        """Process one chat message and return the answer as a text stream.

        Raises:
            UnauthorizedError: Missing model key or session.
            ForbiddenError: The chat belongs to another user.
        """
        if not api_key or session is None:
            raise UnauthorizedError()

        message = body.message.to_chat_message()
        client = self._client_factory(api_key)
        logger.info(
            "chat_request_started",
            chat_id=str(body.id),
            model=body.selected_chat_model,
            input_language=body.input_language,
            search_language=body.search_language,
            translation_required=body.translation_required,
        )

        await self._resolve_chat(body, message, session, client)

        stored = await self._store.get_messages_by_chat_id(body.id)
        history = [*convert_to_ui_messages(stored), message]

        language = LanguageMiddleware(
            TranslationService(client.language_model(TRANSLATION_MODEL))
        )
        processed = await language.translate_history(
            history, body.input_language, body.search_language
        )

        await self._store.create_stream_id(uuid4(), body.id)

        response = await client.language_model(body.selected_chat_model).generate(
            convert_to_model_messages(processed),
            system_prompt=system_prompt(
                selected_chat_model=body.selected_chat_model,
                request_hints=hints,
                input_language=body.input_language,
                search_language=body.search_language,
            ),
            tools=self._tools,
        )
        logger.info(
            "chat_response_generated",
            chat_id=str(body.id),
            text_len=len(response.text),
            tool_calls=len(response.tool_results),
        )

        assistant = ChatMessage(
            id=uuid4(),
            role="assistant",
            parts=[MessagePart(type="text", text=response.text)],
        )
        # The user's message is stored as written, never the translated copy.
        await self._store.save_messages(
            [to_message_row(message, body.id), to_message_row(assistant, body.id)]
        )

        return language.translate_response(
            response.text, body.search_language, body.input_language
        )

    async def delete_chat(self, chat_id: UUID, session: AuthSession | None) -> Chat:
        """Delete a chat owned by the session's user and return it."""
        if session is None:
            raise UnauthorizedError()

        chat = await self._store.get_chat_by_id(chat_id)
        if chat is None or chat.user_id != session.user.id:
            raise ForbiddenError()

        deleted = await self._store.delete_chat_by_id(chat_id, session.user.id)
        if deleted is None:
            raise ForbiddenError()
        return deleted

    async def _resolve_chat(
        self,
        body: PostRequestBody,
        message: ChatMessage,
        session: AuthSession,
        client: ModelClient,
    ) -> None:
        chat = await self._store.get_chat_by_id(body.id)
        if chat is None:
            title = await generate_title_from_user_message(
                message, client.language_model(TITLE_MODEL)
            )
            await self._store.save_chat(
                chat_id=body.id,
                user_id=session.user.id,
                title=title,
                visibility=body.selected_visibility_type,
            )
        elif chat.user_id != session.user.id:
            logger.info("chat_access_forbidden", chat_id=str(body.id))
            raise ForbiddenError()
