"""Chat persistence queries.

ChatStore wraps one request-scoped AsyncSession. Writes the pipeline relies
on before it starts streaming (new chat, stream id, the message batch) are
committed explicitly so they never depend on dependency teardown order.
"""

from __future__ import annotations

from typing import Any
from uuid import UUID

import structlog
from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from debabel.core.exceptions import DatabaseError
from debabel.models.chat import Chat
from debabel.models.message import Message
from debabel.models.stream import Stream

logger = structlog.get_logger(__name__)


class ChatStore:
    """Chat, message and stream persistence."""

    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    async def get_chat_by_id(self, chat_id: UUID) -> Chat | None:
        result = await self._db.execute(select(Chat).where(Chat.id == chat_id))
        return result.scalar_one_or_none()

    async def save_chat(
        self,
        chat_id: UUID,
        user_id: UUID,
        title: str,
        visibility: str,
    ) -> Chat:
        chat = Chat(id=chat_id, user_id=user_id, title=title, visibility=visibility)
        self._db.add(chat)
        await self._commit()
        logger.info("chat_created", chat_id=str(chat_id), visibility=visibility)
        return chat

    async def get_messages_by_chat_id(self, chat_id: UUID) -> list[Message]:
        result = await self._db.execute(
            select(Message)
            .where(Message.chat_id == chat_id)
            .order_by(Message.created_at.asc())
        )
        return list(result.scalars().all())

    async def save_messages(self, messages: list[dict[str, Any]]) -> None:
        """Persist a batch of messages atomically: all rows or none."""
        self._db.add_all([Message(**m) for m in messages])
        await self._commit()
        logger.debug("messages_saved", count=len(messages))

    async def create_stream_id(self, stream_id: UUID, chat_id: UUID) -> None:
        self._db.add(Stream(id=stream_id, chat_id=chat_id))
        await self._commit()

    async def delete_chat_by_id(self, chat_id: UUID, user_id: UUID) -> Chat | None:
        """Delete a chat with its messages and streams.

        Ownership is re-checked in the delete statement itself. Returns the
        deleted chat, or None if no chat with that id belongs to the user.
        """
        owned = select(Chat.id).where(Chat.id == chat_id, Chat.user_id == user_id)
        try:
            await self._db.execute(delete(Message).where(Message.chat_id.in_(owned)))
            await self._db.execute(delete(Stream).where(Stream.chat_id.in_(owned)))
            result = await self._db.execute(
                delete(Chat)
                .where(Chat.id == chat_id, Chat.user_id == user_id)
                .returning(Chat)
            )
            chat = result.scalar_one_or_none()
        except Exception:
            await self._db.rollback()
            raise
        if chat is None:
            await self._db.rollback()
            return None
        await self._commit()
        logger.info("chat_deleted", chat_id=str(chat_id))
        return chat

    async def _commit(self) -> None:
        try:
            await self._db.commit()
        except SQLAlchemyError as e:
            await self._db.rollback()
            logger.error("chat_store_commit_failed", error=str(e))
            raise DatabaseError() from e
