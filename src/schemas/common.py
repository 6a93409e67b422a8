"""Common schemas used across the application."""

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class HealthStatus(str, Enum):
    """Health check status values."""

    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"


class HealthResponse(BaseModel):
    """Response schema for basic health check endpoint.

    Used for liveness probes to verify the service is running.
    """

    model_config = ConfigDict(from_attributes=True)

    status: HealthStatus = Field(description="Current health status")
    timestamp: datetime = Field(default_factory=_utcnow, description="Check timestamp")
    version: str = Field(default="0.1.0", description="API version")


class ServiceStatusResponse(BaseModel):
    """Response schema for the root status endpoint."""

    status: str = Field(default="ok", description="Service status")
    supabase_configured: bool = Field(description="Whether Supabase URL and key are set")


class CheckResult(BaseModel):
    """Result of an individual dependency check.

    Used in readiness checks to report status of each dependency.
    """

    model_config = ConfigDict(from_attributes=True)

    name: str = Field(description="Name of the dependency being checked")
    healthy: bool = Field(description="Whether the dependency is healthy")
    latency_ms: float | None = Field(default=None, description="Response time in milliseconds")
    error: str | None = Field(default=None, description="Error message if unhealthy")


class ReadinessResponse(BaseModel):
    """Response schema for readiness check endpoint.

    Used for readiness probes to verify all dependencies are available.
    """

    model_config = ConfigDict(from_attributes=True)

    status: HealthStatus = Field(description="Overall readiness status")
    timestamp: datetime = Field(default_factory=_utcnow, description="Check timestamp")
    checks: list[CheckResult] = Field(default_factory=list, description="Individual check results")


class SuccessResponse(BaseModel):
    """Bare acknowledgement returned by mutating endpoints."""

    success: bool = Field(default=True, description="Always true on success")
    message: str | None = Field(default=None, description="Optional human-readable note")


class ErrorResponse(BaseModel):
    """Standard error response schema.

    All API errors are returned in this format. ``detail`` carries the
    collaborator's raw diagnostic text when one is available.
    """

    model_config = ConfigDict(from_attributes=True)

    success: bool = Field(default=False, description="Always false for errors")
    error: str = Field(description="Error type or category")
    message: str = Field(description="Human-readable error description")
    detail: Any = Field(default=None, description="Raw diagnostic detail from the failing collaborator")
    request_id: str | None = Field(default=None, description="Request ID for tracing")
    timestamp: datetime = Field(default_factory=_utcnow, description="Error timestamp")
