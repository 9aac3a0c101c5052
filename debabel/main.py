"""FastAPI application entrypoint.

All routes prefixed /v1. Auto-generated OpenAPI docs at /docs.

No model provider is created at startup: every chat request carries the
caller's own OpenAI key and builds its own client (see api/deps.py).
"""

from contextlib import asynccontextmanager
import logging
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from debabel.api.v1.chat import router as chat_router
from debabel.api.v1.health import router as health_router
from debabel.api.v1.languages import router as languages_router
from debabel.core.config import settings
from debabel.core.exceptions import BadRequestError, ChatError
from debabel.db.postgres import close_postgres


def _configure_logging() -> None:
    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=True,
    )
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


_configure_logging()

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application startup and shutdown lifecycle."""
    logger.info("app_startup", env=settings.app_env)
    yield
    logger.info("app_shutdown")
    await close_postgres()


app = FastAPI(
    title="De-Babel Chat API",
    description="Chat with a language model in one language while it is queried in another.",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS: permissive outside production
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if not settings.is_production else [],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ChatError)
async def chat_error_handler(request: Request, exc: ChatError) -> JSONResponse:
    """Structured error envelope for all chat API exceptions."""
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(),
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Malformed request bodies are a bad_request, not a 422."""
    logger.info(
        "request_validation_failed",
        path=request.url.path,
        error_count=len(exc.errors()),
    )
    error = BadRequestError()
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


# Mount all v1 routers
app.include_router(health_router, prefix="/v1")
app.include_router(languages_router, prefix="/v1")
app.include_router(chat_router, prefix="/v1")
