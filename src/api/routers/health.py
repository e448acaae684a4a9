"""Health check with validator readiness and runtime metrics."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from src.api.dependencies import get_metrics
from src.api.registry import registry
from src.db.redis import ping_redis
from src.security.metrics import ValidationMetrics

router = APIRouter(prefix="/api/v1", tags=["health"])


class HealthResponse(BaseModel):
    status: str
    version: str
    uptime_sec: int
    validator_ready: bool
    cache_backend: str
    redis_ok: bool | None = None
    metrics: dict[str, Any]


@router.get("/health", response_model=HealthResponse)
async def health_check(metrics: ValidationMetrics = Depends(get_metrics)) -> HealthResponse:
    """Report validator readiness and runtime counters."""
    summary = metrics.get_summary()
    validator_ready = registry.validator is not None

    redis_ok: bool | None = None
    if registry.cache_backend == "redis":
        redis_ok = await ping_redis()

    healthy = validator_ready and redis_ok is not False
    return HealthResponse(
        status="ok" if healthy else "degraded",
        version="0.1.0",
        uptime_sec=summary.get("uptime_sec", 0),
        validator_ready=validator_ready,
        cache_backend=registry.cache_backend,
        redis_ok=redis_ok,
        metrics=summary,
    )
