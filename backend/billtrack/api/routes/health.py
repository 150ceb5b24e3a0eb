"""Liveness endpoint."""

from fastapi import APIRouter

from billtrack.core.config import settings

router = APIRouter()


@router.get("/health")
async def health():
    return {"status": "ok", "app": settings.APP_NAME, "version": settings.APP_VERSION}
