# =============================================================================
# app/routers/health.py - Health Check Endpoints
# =============================================================================
# Public probes used by load balancers and the container runtime:
# - /health        process is up, reports environment and version
# - /health/ready  both tables and the attachment bucket are reachable
# - /health/live   process liveness only, no I/O
#
# Probe failures are logged with their cause; responses only carry
# "healthy" / "unhealthy" so driver errors never reach clients.
# =============================================================================

import logging
from datetime import datetime, timezone
from typing import Callable

from fastapi import APIRouter, Response, status
from pydantic import BaseModel, Field

from app.config import settings
from lib.supabase_client import SupabaseClient, TODOS_TABLE, USERS_TABLE

logger = logging.getLogger(__name__)

router = APIRouter()

APP_VERSION = "1.0.0"

HEALTHY = "healthy"
UNHEALTHY = "unhealthy"


class HealthResponse(BaseModel):
    status: str
    timestamp: str
    environment: str
    version: str


class DependencyChecks(BaseModel):
    """Per-dependency probe results."""
    users_table: str = Field(..., description="users table reachable")
    todos_table: str = Field(..., description="todos table reachable")
    storage_bucket: str = Field(..., description="attachment bucket reachable")


class ReadinessResponse(BaseModel):
    status: str = Field(..., description="'ready' or 'degraded'")
    bucket: str = Field(..., description="Configured attachment bucket")
    checks: DependencyChecks
    timestamp: str


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _probe(name: str, check: Callable[[], object]) -> str:
    try:
        check()
    except Exception as e:
        logger.warning(f"Readiness probe '{name}' failed: {e}")
        return UNHEALTHY
    return HEALTHY


def _table_probe(table: str) -> Callable[[], object]:
    def check():
        return SupabaseClient.get_client().table(table).select("id").limit(1).execute()
    return check


def _bucket_probe() -> object:
    return SupabaseClient.get_client().storage.get_bucket(settings.STORAGE_BUCKET)


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Report that the API process is serving requests."""
    return HealthResponse(
        status=HEALTHY,
        timestamp=_now(),
        environment=settings.ENVIRONMENT,
        version=APP_VERSION,
    )


@router.get("/health/ready", response_model=ReadinessResponse)
async def readiness_check(response: Response):
    """
    Check that the todo API can serve traffic.

    Probes the users and todos tables and the configured attachment
    bucket. Any failing probe makes the service "degraded" and the
    response a 503, so load balancers stop routing to it.
    """
    checks = DependencyChecks(
        users_table=_probe(USERS_TABLE, _table_probe(USERS_TABLE)),
        todos_table=_probe(TODOS_TABLE, _table_probe(TODOS_TABLE)),
        storage_bucket=_probe(settings.STORAGE_BUCKET, _bucket_probe),
    )

    ready = all(value == HEALTHY for value in checks.model_dump().values())
    if not ready:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return ReadinessResponse(
        status="ready" if ready else "degraded",
        bucket=settings.STORAGE_BUCKET,
        checks=checks,
        timestamp=_now(),
    )


@router.get("/health/live")
async def liveness_check() -> dict:
    """Liveness only; never touches Supabase."""
    return {"status": "alive", "timestamp": _now()}
