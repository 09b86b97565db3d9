"""
Health, readiness, and metrics endpoints for operational visibility.

This module provides:
- /: Service information
- /health: Liveness probe (is the app running?)
- /ready: Readiness probe (is the database reachable?)
- /metrics: Request counters as JSON

No authentication is required; these are infrastructure endpoints.
"""
import logging
import time
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel

from core.datetime_utils import format_iso, utc_now
from core.dependencies import get_database
from core.middleware import get_metrics_collector
from repositories.base import Database

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health & Observability"])

SERVICE_NAME = "Patient Service API"
SERVICE_VERSION = "1.0.0"


# =============================================================================
# RESPONSE MODELS
# =============================================================================

class HealthResponse(BaseModel):
    """Response model for /health endpoint."""
    status: str
    version: str
    timestamp: str


class DependencyStatus(BaseModel):
    """Status of a single dependency."""
    name: str
    status: str  # "ok" or "unavailable"
    latency_ms: Optional[float] = None
    message: Optional[str] = None


class ReadyResponse(BaseModel):
    """Response model for /ready endpoint."""
    status: str  # "ready" or "not_ready"
    dependencies: List[DependencyStatus]
    timestamp: str


class MetricsResponse(BaseModel):
    """Response model for /metrics endpoint."""
    requests_total: int
    requests_by_status: Dict[str, int]
    mean_duration_ms: float


# =============================================================================
# ENDPOINTS
# =============================================================================

@router.get("/", summary="API root", description="Root endpoint with basic API information.")
async def root() -> Dict[str, Any]:
    return {
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
        "docs": "/docs",
        "health": "/health",
        "ready": "/ready",
        "metrics": "/metrics"
    }


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Liveness probe",
    description="Returns immediately without checking dependencies."
)
async def health_check() -> HealthResponse:
    return HealthResponse(
        status="healthy",
        version=SERVICE_VERSION,
        timestamp=format_iso(utc_now())
    )


def _check_database(db: Database) -> DependencyStatus:
    """Run a trivial query to verify the database is reachable."""
    start = time.perf_counter()
    try:
        conn = db.get_connection()
        try:
            conn.execute("SELECT 1")
        finally:
            conn.close()

        return DependencyStatus(
            name="database",
            status="ok",
            latency_ms=round((time.perf_counter() - start) * 1000, 2),
            message="SQLite connection healthy"
        )
    except Exception as e:
        logger.error("Database health check failed", extra={"error": str(e)})
        return DependencyStatus(
            name="database",
            status="unavailable",
            latency_ms=round((time.perf_counter() - start) * 1000, 2),
            message=f"Connection failed: {type(e).__name__}"
        )


@router.get(
    "/ready",
    response_model=ReadyResponse,
    summary="Readiness probe",
    description="Verifies the database is reachable. Returns 503 if not ready."
)
def readiness_check(response: Response, db: Database = Depends(get_database)) -> ReadyResponse:
    db_status = _check_database(db)

    if db_status.status == "ok":
        status = "ready"
    else:
        status = "not_ready"
        response.status_code = 503

    return ReadyResponse(
        status=status,
        dependencies=[db_status],
        timestamp=format_iso(utc_now())
    )


@router.get(
    "/metrics",
    response_model=MetricsResponse,
    summary="Request metrics",
    description="Requests served since startup, by status class, with mean latency."
)
async def get_metrics() -> MetricsResponse:
    return MetricsResponse(**get_metrics_collector().snapshot())
