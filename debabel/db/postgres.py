"""Async SQLAlchemy engine and request-scoped sessions for PostgreSQL.

The engine connects lazily, so importing this module never touches the
database. Stores commit their own writes; the session dependency only
rolls back on failure and closes.
"""

from collections.abc import AsyncGenerator

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from debabel.core.config import settings
from debabel.core.exceptions import DatabaseError

logger = structlog.get_logger(__name__)


class Base(DeclarativeBase):
    pass


engine: AsyncEngine = create_async_engine(
    settings.postgres_url,
    pool_size=settings.postgres_pool_size,
    max_overflow=settings.postgres_max_overflow,
    pool_pre_ping=True,
)

async_session_factory = async_sessionmaker(engine, expire_on_commit=False)


async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency yielding one AsyncSession per request.

    Driver errors surface as DatabaseError (``bad_request:database``).
    """
    async with async_session_factory() as session:
        try:
            yield session
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error("postgres_session_error", error=str(e))
            raise DatabaseError() from e
        except Exception:
            await session.rollback()
            raise


async def close_postgres() -> None:
    logger.info("postgres_shutdown")
    await engine.dispose()
