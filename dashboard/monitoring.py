"""
Health check and readiness endpoints for the scan dashboard backend.
"""
import os
import time
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel

from dashboard.config import get_export_dir

router = APIRouter(tags=["monitoring"])

# Application start time
START_TIME = time.time()
APP_VERSION = "1.0.0"


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    timestamp: str
    uptime_seconds: float
    version: str


class ReadinessResponse(BaseModel):
    """Readiness check response model."""

    ready: bool
    checks: Dict[str, Dict[str, Any]]


@router.get("/health", response_model=HealthResponse, status_code=status.HTTP_200_OK)
async def health_check() -> HealthResponse:
    """
    Basic health check endpoint.
    Returns 200 OK if the service is running.
    """
    return HealthResponse(
        status="ok",
        timestamp=datetime.now(timezone.utc).isoformat(),
        uptime_seconds=round(time.time() - START_TIME, 2),
        version=APP_VERSION,
    )


@router.get("/ready", response_model=ReadinessResponse)
def readiness_check(response: Response, export_dir: str = Depends(get_export_dir)) -> ReadinessResponse:
    """
    Readiness check endpoint.
    The backend is ready once the export directory can be listed.
    """
    try:
        with os.scandir(export_dir):
            pass
        checks = {"export_dir": {"status": "ok", "path": export_dir}}
        ready = True
    except OSError as exc:
        checks = {"export_dir": {"status": "error", "path": export_dir, "error": str(exc)}}
        ready = False

    if not ready:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return ReadinessResponse(ready=ready, checks=checks)
