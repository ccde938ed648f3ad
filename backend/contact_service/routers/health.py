# contact_service/routers/health.py
from fastapi import APIRouter

from contact_service.core.cache import get_redis
from contact_service.core.settings import settings

router = APIRouter(prefix="/health", tags=["health"])

@router.get("")
async def health_root():
    backend = settings.rate_limit_backend.lower()
    out = {
        "status": "ok",
        "email_service": settings.email_service.lower(),
        "rate_limit_backend": backend,
    }
    if backend == "redis":
        # limiter fails open without Redis; surface it here instead
        out["redis_configured"] = get_redis() is not None
    return out
