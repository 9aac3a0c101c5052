"""Shared FastAPI dependencies: auth, database sessions, service injection.

There is no process-wide LLM provider: the chat pipeline receives a
factory and builds a model client from each request's own API key.
"""

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from debabel.core.security import AuthSession, auth
from debabel.db.postgres import get_async_session
from debabel.db.queries import ChatStore
from debabel.services.chat.pipeline import ChatPipeline
from debabel.services.chat.prompts import RequestHints
from debabel.services.llm.factory import ModelClientFactory, make_model_client


# ---------------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------------

async def get_db(
    session: AsyncSession = Depends(get_async_session),
) -> AsyncSession:
    """Yield an async database session."""
    return session


def get_chat_store(db: AsyncSession = Depends(get_db)) -> ChatStore:
    return ChatStore(db)


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------

async def get_session(request: Request) -> AuthSession | None:
    """Return the caller's session, or None. Routes decide whether to reject."""
    return await auth(request)


def get_request_hints(request: Request) -> RequestHints:
    return RequestHints.from_request(request)


# ---------------------------------------------------------------------------
# Service constructors, wired via Depends()
# ---------------------------------------------------------------------------

def get_model_client_factory() -> ModelClientFactory:
    """Return the per-request model client factory."""
    return make_model_client


def get_chat_pipeline(
    store: ChatStore = Depends(get_chat_store),
    client_factory: ModelClientFactory = Depends(get_model_client_factory),
) -> ChatPipeline:
    """Return a ChatPipeline wired to this request's database session."""
    return ChatPipeline(store=store, client_factory=client_factory)
