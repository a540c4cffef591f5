"""Health check endpoints."""

import os
import time
from datetime import datetime, timezone
from pathlib import Path

from fastapi import APIRouter, Depends, Request, Response, status

from ..config import APISettings, get_settings
from ..schemas import ComponentHealth, HealthStatus

router = APIRouter()


def check_browser(request: Request) -> ComponentHealth:
    """Check the browser backend."""
    start = time.perf_counter()
    client = getattr(request.app.state, "browser_client", None)
    latency = (time.perf_counter() - start) * 1000
    if client is None:
        return ComponentHealth(
            status="unhealthy", latency_ms=latency, message="Audit engine not initialized"
        )
    if hasattr(client, "is_browser_alive") and not client.is_browser_alive():
        return ComponentHealth(
            status="healthy", latency_ms=latency, message="Browser starts on first audit"
        )
    return ComponentHealth(status="healthy", latency_ms=latency, message=None)


def check_storage(request: Request) -> ComponentHealth:
    """Check that the screenshot directory is writable."""
    start = time.perf_counter()
    orchestrator = getattr(request.app.state, "orchestrator", None)
    root = getattr(orchestrator.assembler.store, "root", None) if orchestrator else None
    if root is None:
        return ComponentHealth(
            status="healthy",
            latency_ms=(time.perf_counter() - start) * 1000,
            message="Non-filesystem store",
        )
    try:
        Path(root).mkdir(parents=True, exist_ok=True)
        writable = os.access(root, os.W_OK)
        message = None if writable else f"{root} is not writable"
    except OSError as e:
        writable = False
        message = str(e)
    return ComponentHealth(
        status="healthy" if writable else "unhealthy",
        latency_ms=(time.perf_counter() - start) * 1000,
        message=message,
    )


@router.get("/health", response_model=HealthStatus)
async def health_check(
    request: Request,
    settings: APISettings = Depends(get_settings),
) -> HealthStatus:
    """
    Health check endpoint for load balancers and monitoring.

    Returns the status of all system components.
    """
    checks = {
        "browser": check_browser(request),
        "storage": check_storage(request),
    }

    statuses = [c.status for c in checks.values()]
    if all(s == "healthy" for s in statuses):
        overall = "healthy"
    elif any(s == "unhealthy" for s in statuses):
        overall = "unhealthy"
    else:
        overall = "degraded"

    return HealthStatus(
        status=overall,
        version=settings.app_version,
        timestamp=datetime.now(timezone.utc),
        checks=checks,
    )


@router.get("/health/live")
async def liveness() -> dict[str, str]:
    """
    Kubernetes liveness probe.

    Returns 200 if the application is running.
    """
    return {"status": "alive"}


@router.get("/health/ready")
async def readiness(request: Request, response: Response) -> dict[str, str]:
    """
    Kubernetes readiness probe.

    Returns 200 when audits can be served, 503 otherwise.
    """
    reason = None
    if check_browser(request).status == "unhealthy":
        reason = "engine_unavailable"
    elif check_storage(request).status == "unhealthy":
        reason = "storage_unavailable"

    if reason is not None:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return {"status": "not_ready", "reason": reason}

    return {"status": "ready"}
