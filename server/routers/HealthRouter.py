"""Liveness endpoints polled by the ping and keep-alive services."""

import os
import time
from datetime import datetime, timezone

from fastapi import APIRouter

router = APIRouter(prefix="/api", tags=["health"])

_STARTED_AT = time.monotonic()


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("/ping")
async def ping() -> dict:
    return {"status": "ok", "timestamp": _now()}


@router.get("/health")
async def health() -> dict:
    """Report status, process uptime in seconds and the deployment environment."""
    return {
        "status": "OK",
        "timestamp": _now(),
        "uptime": time.monotonic() - _STARTED_AT,
        "environment": os.getenv("APP_ENV", "development"),
    }
