# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Health check endpoints.

This module provides the liveness endpoint for the API.
"""

import logging
import time
from datetime import datetime, timezone

from fastapi import APIRouter, Request
from pydantic import BaseModel, Field

from eduaffect import __version__
from eduaffect.core.config import get_settings
from eduaffect.infrastructure.cache import RedisClient

logger = logging.getLogger(__name__)

router = APIRouter()

# Track server start time for uptime calculation
_server_start_time = time.time()


class ComponentHealth(BaseModel):
    """Individual component health status."""
    status: str = Field(description="Component status")
    latency_ms: float | None = Field(None, description="Response latency in ms")


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str = Field(description="Overall health status")
    timestamp: datetime = Field(description="Current server timestamp")
    version: str = Field(description="API version")
    environment: str = Field(description="Deployment environment")
    uptime_seconds: int = Field(description="Server uptime in seconds")
    store_backend: str = Field(description="Emotional state store in use")
    redis: ComponentHealth | None = Field(None, description="Redis status, when used")


async def check_redis(client: RedisClient) -> ComponentHealth:
    """Check the Redis connection used by the state store."""
    start = time.time()
    healthy = await client.ping()
    if not healthy:
        logger.error("Redis health check failed")
        return ComponentHealth(status="unhealthy")
    latency = (time.time() - start) * 1000
    return ComponentHealth(status="healthy", latency_ms=round(latency, 2))


@router.get("/health", response_model=HealthResponse)
async def health(request: Request) -> HealthResponse:
    """Liveness check.

    Reports "degraded" when the Redis store is configured but unreachable.
    """
    settings = get_settings()
    redis_client: RedisClient | None = getattr(request.app.state, "redis", None)

    redis_health = None
    overall = "healthy"
    if redis_client is not None:
        redis_health = await check_redis(redis_client)
        if redis_health.status != "healthy":
            overall = "degraded"

    return HealthResponse(
        status=overall,
        timestamp=datetime.now(timezone.utc),
        version=__version__,
        environment=settings.environment,
        uptime_seconds=int(time.time() - _server_start_time),
        store_backend="redis" if redis_client is not None else "memory",
        redis=redis_health,
    )
