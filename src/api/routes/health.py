from __future__ import annotations

from fastapi import APIRouter
from core.config import get_settings

router = APIRouter(tags=["health"])

@router.get("/health", summary="Health check")
def health():
    """
    Health endpoint minimale.
    """
    settings = get_settings()
    return {
        "status": "ok",
        "cache_enabled": settings.enable_cache,
        "futebolnatv_enabled": settings.enable_futebolnatv,
        "timezone": settings.timezone,
    }
