# =============================================================================
# app/routers/health.py - Health Check Endpoints
# =============================================================================
# Provides health check endpoints for monitoring and load balancers.
# =============================================================================

from datetime import datetime, timezone

from fastapi import APIRouter
from pydantic import BaseModel

from app.config import get_settings
from app.dependencies import ServicesDep
from lib.supabase_client import SupabaseClientError

router = APIRouter()

VERSION = "1.0.0"


# =============================================================================
# Response Models
# =============================================================================

class HealthResponse(BaseModel):
    """Basic health check response."""
    status: str
    timestamp: str
    environment: str
    version: str


class ChecksResponse(BaseModel):
    """Individual service checks."""
    database: str
    file_server: str
    realtime: str


class ReadinessResponse(BaseModel):
    """Readiness check response."""
    status: str
    checks: ChecksResponse
    timestamp: str


class LivenessResponse(BaseModel):
    """Liveness check response."""
    status: str
    timestamp: str


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


# =============================================================================
# Endpoints
# =============================================================================

@router.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Health check endpoint.

    Returns basic health status for load balancers and monitoring.
    """
    return HealthResponse(
        status="healthy",
        timestamp=_now(),
        environment=get_settings().ENVIRONMENT,
        version=VERSION,
    )


@router.get("/health/ready", response_model=ReadinessResponse)
async def readiness_check(services: ServicesDep):
    """
    Readiness check endpoint.

    Checks the store with a one-row read of site_settings and reports
    whether the image file server is configured.
    """
    checks = ChecksResponse(database="unknown", file_server="unknown", realtime="unknown")

    try:
        services.store.select("site_settings", columns="id", limit=1)
        checks.database = "healthy"
    except SupabaseClientError as e:
        checks.database = f"unhealthy: {str(e)[:50]}"

    checks.file_server = "configured" if services.relay.uploader.configured else "not configured"
    checks.realtime = f"{services.notifier.backend} ({services.hub.subscriber_count()} subscribers)"

    all_healthy = checks.database == "healthy" and checks.file_server == "configured"

    return ReadinessResponse(
        status="ready" if all_healthy else "degraded",
        checks=checks,
        timestamp=_now(),
    )


@router.get("/health/live", response_model=LivenessResponse)
async def liveness_check():
    """
    Liveness check endpoint.

    Returns whether the service process is alive.
    """
    return LivenessResponse(status="alive", timestamp=_now())
