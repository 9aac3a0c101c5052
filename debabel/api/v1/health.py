"""Liveness endpoint."""

from fastapi import APIRouter

from debabel.core.config import settings

router = APIRouter(tags=["health"])


@router.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok", "env": settings.app_env}
