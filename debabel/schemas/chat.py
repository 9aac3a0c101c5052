"""Chat request/response schemas."""

import uuid
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, HttpUrl


class MessagePart(BaseModel):
    """One part of a UI message.

    Only ``type == "text"`` parts carry translatable text; every other
    part kind is kept as-is, including any extra fields it carries.
    """

    model_config = ConfigDict(extra="allow")

    type: str
    text: str | None = None


class ChatMessage(BaseModel):
    """A UI message: the unit exchanged with the client and the translator."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    role: Literal["user", "assistant", "system"]
    parts: list[MessagePart]
    metadata: dict[str, Any] | None = None

    def text(self) -> str:
        """Concatenated text of all text parts."""
        return "".join(p.text or "" for p in self.parts if p.type == "text")


# ---------------------------------------------------------------------------
# POST /v1/chat request body
# ---------------------------------------------------------------------------


class TextPartIn(BaseModel):
    type: Literal["text"]
    text: str = Field(min_length=1, max_length=2000)


class FilePartIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: Literal["file"]
    media_type: Literal["image/jpeg", "image/png"] = Field(alias="mediaType")
    name: str = Field(min_length=1, max_length=100)
    url: HttpUrl


PartIn = Annotated[Union[TextPartIn, FilePartIn], Field(discriminator="type")]


class UserMessageIn(BaseModel):
    id: uuid.UUID
    role: Literal["user"]
    parts: list[PartIn] = Field(min_length=1)

    def to_chat_message(self) -> ChatMessage:
        return ChatMessage.model_validate(
            self.model_dump(mode="json", by_alias=True)
        )


class PostRequestBody(BaseModel):
    """POST /v1/chat request body."""

    model_config = ConfigDict(populate_by_name=True)

    id: uuid.UUID
    message: UserMessageIn
    selected_chat_model: Literal["chat-model", "chat-model-reasoning"] = Field(
        alias="selectedChatModel"
    )
    selected_visibility_type: Literal["public", "private"] = Field(
        alias="selectedVisibilityType"
    )
    input_language: str = Field(default="en", alias="inputLanguage")
    search_language: str = Field(default="en", alias="searchLanguage")

    @property
    def translation_required(self) -> bool:
        return self.input_language != self.search_language


class ErrorResponse(BaseModel):
    """JSON error envelope returned for every failed request."""

    code: str
    message: str
