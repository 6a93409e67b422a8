"""Status, liveness and readiness endpoints."""

import time

from fastapi import APIRouter, Response, status

from src.core.config import get_settings
from src.core.supabase import check_database_connection
from src.schemas.common import (
    CheckResult,
    HealthResponse,
    HealthStatus,
    ReadinessResponse,
    ServiceStatusResponse,
)

router = APIRouter(tags=["health"])


@router.get(
    "/",
    response_model=ServiceStatusResponse,
    summary="Service status",
    description="Report that the relay is up and whether Supabase is configured.",
)
async def service_status() -> ServiceStatusResponse:
    """Return service status without contacting any collaborator."""
    settings = get_settings()
    return ServiceStatusResponse(
        supabase_configured=bool(settings.supabase_url and settings.supabase_secret_key),
    )


@router.get("/health", response_model=HealthResponse, summary="Liveness probe")
async def health_check() -> HealthResponse:
    """Answer 200 while the process is serving requests."""
    return HealthResponse(status=HealthStatus.HEALTHY)


@router.get(
    "/health/ready",
    response_model=ReadinessResponse,
    responses={503: {"description": "Supabase did not answer"}},
    summary="Readiness probe",
    description="Run a one-row profiles query against Supabase.",
)
async def readiness_check(response: Response) -> ReadinessResponse:
    """Report whether Supabase answers a trivial query.

    Only the database is probed. Mail and image hosts are contacted per
    request and a missing credential there is reported at startup instead.

    Args:
        response: Used to switch the status code to 503.

    Returns:
        ReadinessResponse: The database check result.
    """
    started = time.perf_counter()
    probe = await check_database_connection()
    database = CheckResult(
        name="database",
        healthy=probe["healthy"],
        latency_ms=round((time.perf_counter() - started) * 1000, 2),
        error=probe.get("error"),
    )

    if not database.healthy:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return ReadinessResponse(status=HealthStatus.UNHEALTHY, checks=[database])

    return ReadinessResponse(status=HealthStatus.HEALTHY, checks=[database])
