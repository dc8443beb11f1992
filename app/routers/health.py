# =============================================================================
# app/routers/health.py - Health Check Endpoints
# =============================================================================
# Provides health check endpoints for monitoring and load balancers.
# =============================================================================

from datetime import datetime, timezone

from fastapi import APIRouter
from pydantic import BaseModel

from app.config import settings

router = APIRouter()

API_VERSION = "1.0.0"


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


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
    redis: str


class ReadinessResponse(BaseModel):
    """Readiness check response."""
    status: str
    checks: ChecksResponse
    timestamp: str


class LivenessResponse(BaseModel):
    """Liveness check response."""
    status: str
    timestamp: str


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
        timestamp=_timestamp(),
        environment=settings.ENVIRONMENT,
        version=API_VERSION,
    )


@router.get("/health/ready", response_model=ReadinessResponse)
async def readiness_check():
    """
    Readiness check endpoint.

    Returns whether the service is ready to accept requests.
    Checks the database (profiles table) and Redis (signup codes, Celery).
    """
    from core.services.otp_service import otp_store
    from lib.supabase_client import SupabaseClient

    checks = ChecksResponse(database="unknown", redis="unknown")

    # Check database
    try:
        client = SupabaseClient.get_client()
        client.table("profiles").select("id").limit(1).execute()
        checks.database = "healthy"
    except Exception as e:
        checks.database = f"unhealthy: {str(e)[:50]}"

    # Check Redis
    try:
        checks.redis = "healthy" if otp_store.ping() else "unhealthy: no PONG"
    except Exception as e:
        checks.redis = f"unhealthy: {str(e)[:50]}"

    # Overall status
    all_healthy = checks.database == "healthy" and checks.redis == "healthy"

    return ReadinessResponse(
        status="ready" if all_healthy else "degraded",
        checks=checks,
        timestamp=_timestamp(),
    )


@router.get("/health/live", response_model=LivenessResponse)
async def liveness_check():
    """
    Liveness check endpoint.

    Returns whether the service process is alive.
    Used by Kubernetes/Docker for restart decisions.
    """
    return LivenessResponse(
        status="alive",
        timestamp=_timestamp(),
    )
