"""API middleware for request logging and metrics."""

import logging
import re
import time
from collections.abc import Awaitable, Callable
from typing import Any, cast
from uuid import uuid4

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
AUDIT_OUTCOME_HEADER = "X-Audit-Outcome"

_UUID_PATTERN = re.compile(r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs one line per request, tagged with a request id.

    The id is taken from ``X-Request-ID`` when the caller sends one and is
    echoed back. Audit responses carry their outcome in ``X-Audit-Outcome``,
    which is appended to the log line; 5xx responses are logged as warnings.
    """

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid4().hex[:12]
        request.state.request_id = request_id
        start_time = time.perf_counter()

        response = cast(Response, await call_next(request))

        duration = time.perf_counter() - start_time
        outcome = response.headers.get(AUDIT_OUTCOME_HEADER)

        message = f"[{request_id}] {request.method} {request.url.path} -> {response.status_code}"
        if outcome:
            message += f" audit={outcome}"
        logger.log(
            logging.WARNING if response.status_code >= 500 else logging.INFO,
            f"{message} ({duration:.3f}s)",
            extra={
                "request_id": request_id,
                "status_code": response.status_code,
                "audit_outcome": outcome,
                "duration_ms": round(duration * 1000, 2),
                "client_ip": request.client.host if request.client else None,
            },
        )

        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers["X-Response-Time"] = f"{duration:.3f}s"
        return response


class MetricsMiddleware(BaseHTTPMiddleware):
    """Prometheus request metrics labelled by route template."""

    def __init__(self, app: Any, registry: Any = None) -> None:
        super().__init__(app)
        from prometheus_client import REGISTRY, Counter, Gauge, Histogram

        self.registry = registry or REGISTRY
        self.request_counter = Counter(
            "http_requests_total",
            "Total HTTP requests",
            ["method", "path", "status"],
            registry=self.registry,
        )
        self.request_duration = Histogram(
            "http_request_duration_seconds",
            "HTTP request duration in seconds",
            ["method", "path"],
            registry=self.registry,
        )
        self.active_requests = Gauge(
            "http_requests_active",
            "Active HTTP requests",
            registry=self.registry,
        )

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        if request.url.path == "/metrics":
            return cast(Response, await call_next(request))

        status_code = 500
        self.active_requests.inc()
        start_time = time.perf_counter()
        try:
            response = cast(Response, await call_next(request))
            status_code = response.status_code
            return response
        finally:
            duration = time.perf_counter() - start_time
            self.active_requests.dec()
            path = route_label(request)
            self.request_counter.labels(method=request.method, path=path, status=status_code).inc()
            self.request_duration.labels(method=request.method, path=path).observe(duration)


def route_label(request: Request) -> str:
    """Return the matched route template, or the normalized path when none matched."""
    route = request.scope.get("route")
    template = getattr(route, "path", None)
    if template:
        return cast(str, template)
    return normalize_path(request.url.path)


def normalize_path(path: str) -> str:
    """Collapse per-audit identifiers so metric labels stay bounded.

    Screenshot URLs (``/artifacts/audits/<uuid>.webp``) become
    ``/artifacts/audits/{id}.webp``.
    """
    path = _UUID_PATTERN.sub("{id}", path)
    return re.sub(r"/\d+(/|$)", "/{id}\\1", path)
