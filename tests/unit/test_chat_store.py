"""Unit tests for ChatStore against a mocked AsyncSession.

Tests:
  - save_messages adds the whole batch and commits once
  - a failed commit rolls back and surfaces as bad_request:database
  - delete_chat_by_id removes children first and rolls back when not owned
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from debabel.core.exceptions import DatabaseError
from debabel.db.queries import ChatStore
from debabel.models.chat import Chat
from debabel.models.message import Message


def _make_mock_db() -> MagicMock:
    """Create a mock async DB session."""
    db = MagicMock()
    db.add = MagicMock()
    db.add_all = MagicMock()
    db.execute = AsyncMock()
    db.commit = AsyncMock()
    db.rollback = AsyncMock()
    return db


def _row(chat_id: uuid.UUID, role: str) -> dict:
    return {
        "id": uuid.uuid4(),
        "chat_id": chat_id,
        "role": role,
        "parts": [{"type": "text", "text": role}],
        "attachments": [],
        "created_at": datetime.now(timezone.utc),
    }


class TestSaveMessages:
    @pytest.mark.asyncio
    async def test_batch_added_and_committed(self, chat_id: uuid.UUID) -> None:
        db = _make_mock_db()

        await ChatStore(db).save_messages([_row(chat_id, "user"), _row(chat_id, "assistant")])

        [rows] = db.add_all.call_args.args
        assert [type(r) for r in rows] == [Message, Message]
        assert [r.role for r in rows] == ["user", "assistant"]
        db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_commit_failure_rolls_back(self, chat_id: uuid.UUID) -> None:
        db = _make_mock_db()
        db.commit.side_effect = OperationalError("INSERT", {}, Exception("down"))

        with pytest.raises(DatabaseError) as exc_info:
            await ChatStore(db).save_messages([_row(chat_id, "user")])

        assert exc_info.value.code == "bad_request:database"
        db.rollback.assert_awaited_once()


class TestSaveChat:
    @pytest.mark.asyncio
    async def test_chat_saved(self, chat_id: uuid.UUID, user_id: uuid.UUID) -> None:
        db = _make_mock_db()

        chat = await ChatStore(db).save_chat(chat_id, user_id, "Title", "public")

        db.add.assert_called_once_with(chat)
        assert chat.visibility == "public"
        db.commit.assert_awaited_once()


class TestDeleteChat:
    @pytest.mark.asyncio
    async def test_owned_chat_deleted(self, chat_id: uuid.UUID, user_id: uuid.UUID) -> None:
        db = _make_mock_db()
        chat = Chat(id=chat_id, user_id=user_id, title="T", visibility="private")
        result = MagicMock()
        result.scalar_one_or_none.return_value = chat
        db.execute.side_effect = [MagicMock(), MagicMock(), result]

        deleted = await ChatStore(db).delete_chat_by_id(chat_id, user_id)

        assert deleted is chat
        assert db.execute.await_count == 3
        db.commit.assert_awaited_once()
        db.rollback.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_not_owned_rolls_back(self, chat_id: uuid.UUID, user_id: uuid.UUID) -> None:
        db = _make_mock_db()
        result = MagicMock()
        result.scalar_one_or_none.return_value = None
        db.execute.side_effect = [MagicMock(), MagicMock(), result]

        assert await ChatStore(db).delete_chat_by_id(chat_id, user_id) is None
        db.rollback.assert_awaited_once()
        db.commit.assert_not_awaited()
