"""Conversions between stored rows, UI messages and model messages."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any
from uuid import UUID

from debabel.models.message import Message
from debabel.schemas.chat import ChatMessage, MessagePart


def convert_to_ui_messages(rows: list[Message]) -> list[ChatMessage]:
    return [
        ChatMessage(
            id=row.id,
            role=row.role,
            parts=[MessagePart.model_validate(p) for p in row.parts],
            metadata={"createdAt": row.created_at.isoformat()} if row.created_at else None,
        )
        for row in rows
    ]


def _user_content(message: ChatMessage) -> list[dict[str, Any]]:
    content: list[dict[str, Any]] = []
    for part in message.parts:
        if part.type == "text" and part.text:
            content.append({"type": "text", "text": part.text})
        elif part.type == "file":
            extra = part.model_extra or {}
            if str(extra.get("mediaType", "")).startswith("image/"):
                content.append({"type": "image_url", "image_url": {"url": extra.get("url")}})
    return content


def convert_to_model_messages(messages: list[ChatMessage]) -> list[dict[str, Any]]:
    """UI messages → chat-completions messages.

    Parts the model cannot consume (tool parts, non-image files) are dropped,
    and messages left without content are skipped.
    """
    model_messages: list[dict[str, Any]] = []
    for message in messages:
        if message.role == "user":
            content: Any = _user_content(message)
        else:
            content = message.text()
        if content:
            model_messages.append({"role": message.role, "content": content})
    return model_messages


def to_message_row(message: ChatMessage, chat_id: UUID) -> dict[str, Any]:
    """A UI message as keyword arguments for the Message model."""
    return {
        "id": message.id,
        "chat_id": chat_id,
        "role": message.role,
        "parts": [p.model_dump(exclude_none=True) for p in message.parts],
        "attachments": [],
        "created_at": datetime.now(timezone.utc),
    }
