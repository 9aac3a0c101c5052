"""Chat endpoints: send a message (streamed answer) and delete a chat."""

from __future__ import annotations

from uuid import UUID

import structlog
from fastapi import APIRouter, Depends, Header, Query
from fastapi.responses import JSONResponse, StreamingResponse

from debabel.api.deps import get_chat_pipeline, get_request_hints, get_session
from debabel.core.exceptions import BadRequestError, ChatError
from debabel.core.security import AuthSession
from debabel.schemas.chat import PostRequestBody
from debabel.services.chat.pipeline import ChatPipeline
from debabel.services.chat.prompts import RequestHints

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/chat", tags=["chat"])


@router.post("")
async def send_message(
    body: PostRequestBody,
    x_api_key: str | None = Header(default=None, alias="x-api-key"),
    session: AuthSession | None = Depends(get_session),
    hints: RequestHints = Depends(get_request_hints),
    pipeline: ChatPipeline = Depends(get_chat_pipeline),
) -> StreamingResponse:
    """Run a chat turn and stream the answer as plain text.

    The answer arrives in the body's inputLanguage; the model was queried
    in searchLanguage. Unexpected failures are logged with full detail and
    reported to the caller as a generic bad_request.
    """
    try:
        stream = await pipeline.handle(body, x_api_key, session, hints)
    except ChatError:
        raise
    except Exception:
        logger.exception("chat_request_failed", chat_id=str(body.id))
        raise BadRequestError()

    return StreamingResponse(stream, media_type="text/plain; charset=utf-8")


@router.delete("")
async def delete_chat(
    chat_id: str | None = Query(default=None, alias="id"),
    session: AuthSession | None = Depends(get_session),
    pipeline: ChatPipeline = Depends(get_chat_pipeline),
) -> JSONResponse:
    """Delete a chat owned by the signed-in user and return the deleted record."""
    if not chat_id:
        raise BadRequestError()
    try:
        parsed_id = UUID(chat_id)
    except ValueError:
        raise BadRequestError() from None

    deleted = await pipeline.delete_chat(parsed_id, session)
    return JSONResponse(status_code=200, content=deleted.to_dict())
