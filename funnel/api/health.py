"""
Funnel.vc Health Check Endpoints
Liveness and readiness probes.
"""

import asyncio
import logging
import time
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

import redis.asyncio as aioredis
from fastapi import APIRouter, Response, status
from pydantic import BaseModel
from sqlalchemy import text

from funnel.core.config import settings
from funnel.database import AsyncSessionLocal

logger = logging.getLogger(__name__)


class HealthStatus(str, Enum):
    """Health status values for components and overall system."""

    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


class ComponentHealth(BaseModel):
    """Health status for an individual component."""

    status: HealthStatus
    latency_ms: Optional[float] = None
    message: Optional[str] = None


class HealthResponse(BaseModel):
    """Full readiness response."""

    status: HealthStatus
    timestamp: str
    components: dict[str, Any]
    version: str


class LivenessResponse(BaseModel):
    """Simple liveness check response."""

    status: str


# =============================================================================
# Health Check Functions
# =============================================================================


async def check_database() -> ComponentHealth:
    """Run SELECT 1 and measure latency."""
    start_time = time.perf_counter()
    try:
        async with AsyncSessionLocal() as session:
            await session.execute(text("SELECT 1"))
        latency = (time.perf_counter() - start_time) * 1000
        return ComponentHealth(
            status=HealthStatus.HEALTHY,
            latency_ms=round(latency, 2),
            message="Database connection successful",
        )
    except Exception as e:
        latency = (time.perf_counter() - start_time) * 1000
        logger.error(f"Database health check failed: {e}")
        return ComponentHealth(
            status=HealthStatus.UNHEALTHY,
            latency_ms=round(latency, 2),
            message=f"Database connection failed: {str(e)}",
        )


async def check_broker() -> ComponentHealth:
    """
    PING the Redis broker used for CRM sync.

    A broker outage only loses CRM notifications, so it is reported as
    degraded rather than unhealthy.
    """
    start_time = time.perf_counter()
    try:
        redis_client = aioredis.from_url(
            settings.redis_url,
            socket_timeout=5.0,
            socket_connect_timeout=5.0,
        )
        try:
            await redis_client.ping()
        finally:
            await redis_client.aclose()
        latency = (time.perf_counter() - start_time) * 1000
        return ComponentHealth(
            status=HealthStatus.HEALTHY,
            latency_ms=round(latency, 2),
            message="Redis connection successful",
        )
    except Exception as e:
        latency = (time.perf_counter() - start_time) * 1000
        logger.warning(f"Redis health check failed: {e}")
        return ComponentHealth(
            status=HealthStatus.DEGRADED,
            latency_ms=round(latency, 2),
            message=f"Redis connection failed: {str(e)}",
        )


def check_oracle() -> ComponentHealth:
    """Report whether the ranking oracle is configured. No call is made."""
    if settings.anthropic_api_key:
        return ComponentHealth(status=HealthStatus.HEALTHY, message="Ranking oracle configured")
    return ComponentHealth(
        status=HealthStatus.DEGRADED,
        message="ANTHROPIC_API_KEY not set; matches use fallback scores",
    )


def determine_overall_status(components: dict[str, ComponentHealth]) -> HealthStatus:
    """
    Overall status from component statuses.

    The database is critical; anything else only degrades.
    """
    db_status = components.get("database")
    if db_status and db_status.status == HealthStatus.UNHEALTHY:
        return HealthStatus.UNHEALTHY

    if any(component.status != HealthStatus.HEALTHY for component in components.values()):
        return HealthStatus.DEGRADED

    return HealthStatus.HEALTHY


# =============================================================================
# Router Definition
# =============================================================================

router = APIRouter(prefix="/health", tags=["Health"])


@router.get("", response_model=LivenessResponse, summary="Basic liveness check")
async def basic_health() -> LivenessResponse:
    return LivenessResponse(status="ok")


@router.get("/live", response_model=LivenessResponse, summary="Kubernetes liveness probe")
async def liveness_probe() -> LivenessResponse:
    return LivenessResponse(status="ok")


@router.get(
    "/ready",
    response_model=HealthResponse,
    summary="Readiness check",
    responses={
        200: {"description": "Operational, possibly degraded"},
        503: {"description": "Database unavailable"},
    },
)
async def readiness_check(response: Response) -> HealthResponse:
    """
    Verify connectivity to the database and broker.

    Returns 503 only when the database is down.
    """
    db_check, broker_check = await asyncio.gather(check_database(), check_broker())

    components = {
        "database": db_check,
        "redis": broker_check,
        "oracle": check_oracle(),
    }
    overall_status = determine_overall_status(components)

    if overall_status == HealthStatus.UNHEALTHY:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return HealthResponse(
        status=overall_status,
        timestamp=datetime.now(timezone.utc).isoformat(),
        components={name: component.model_dump(mode="json") for name, component in components.items()},
        version=settings.app_version,
    )
