"""Page audit endpoint."""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from prometheus_client import Counter, Histogram

from ...core.errors import InvalidRequest
from ...core.orchestrator import PageAuditOrchestrator
from ..deps import get_orchestrator
from ..middleware import AUDIT_OUTCOME_HEADER
from ..schemas import AuditFailureResponse, AuditSuccessResponse

logger = logging.getLogger(__name__)

router = APIRouter()

AUDITS_TOTAL = Counter(
    "page_audits_total",
    "Page audits by outcome",
    ["outcome"],
)
AUDIT_DURATION = Histogram(
    "page_audit_duration_seconds",
    "Wall-clock duration of page audits",
)


@router.post(
    "/audit",
    response_model=AuditSuccessResponse,
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": AuditFailureResponse},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": AuditFailureResponse},
    },
)
async def create_audit(
    request: Request,
    orchestrator: Annotated[PageAuditOrchestrator, Depends(get_orchestrator)],
) -> JSONResponse:
    """
    Audit one page.

    Navigates to the URL, records console warnings/errors, uncaught page
    errors and failed requests, extracts title and meta description and
    stores a webp screenshot.
    """
    payload: Any
    try:
        payload = await request.json()
    except ValueError:
        payload = None

    with AUDIT_DURATION.time():
        result = await orchestrator.run(payload)

    request_id = getattr(request.state, "request_id", "-")
    if result.success:
        outcome = "success"
        status_code = status.HTTP_200_OK
    else:
        outcome = result.kind
        invalid = result.kind == InvalidRequest.kind
        status_code = (
            status.HTTP_400_BAD_REQUEST if invalid else status.HTTP_500_INTERNAL_SERVER_ERROR
        )
        logger.info(f"[{request_id}] Audit ended with {outcome}: {result.message}")
    AUDITS_TOTAL.labels(outcome=outcome).inc()

    return JSONResponse(
        status_code=status_code,
        content=result.to_payload(),
        headers={AUDIT_OUTCOME_HEADER: outcome},
    )
