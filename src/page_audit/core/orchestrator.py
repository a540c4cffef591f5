"""Main orchestrator for a single page audit."""

import logging
import time
from collections.abc import Mapping
from enum import Enum
from typing import Any

from pydantic import ValidationError

from ..browser.factory import create_browser_client
from ..browser.session import BrowserSession, SessionManager
from ..extractors.seo import SeoExtractor
from ..report.assembler import ReportAssembler
from ..storage.base import ScreenshotStore
from ..storage.local import LocalScreenshotStore
from .capture import ScreenshotCapturer
from .collector import EventCollector
from .errors import InvalidRequest
from .navigator import Navigator
from .types import AuditConfig, AuditReport, AuditRequest, AuditResult, BrowserClient, Viewport

logger = logging.getLogger(__name__)

MISSING_URL_MESSAGE = "Missing 'url' parameter"


class AuditStage(str, Enum):
    """Stages of one audit. Any stage may move to FAILED."""

    IDLE = "idle"
    SESSION_ACQUIRED = "session_acquired"
    LISTENERS_ATTACHED = "listeners_attached"
    NAVIGATED = "navigated"
    EXTRACTED = "extracted"
    CAPTURED = "captured"
    PERSISTED = "persisted"
    REPORTED = "reported"
    FAILED = "failed"
    SESSION_RELEASED = "session_released"


class AuditTrace:
    """Stage history of one audit invocation."""

    def __init__(self) -> None:
        self.stage = AuditStage.IDLE
        self.history: list[AuditStage] = [AuditStage.IDLE]

    def advance(self, stage: AuditStage) -> None:
        logger.debug(f"Audit stage {self.stage.value} -> {stage.value}")
        self.stage = stage
        self.history.append(stage)


def parse_request(payload: Any) -> AuditRequest:
    """Validate an inbound request.

    Args:
        payload: An AuditRequest or a JSON-like mapping

    Returns:
        Validated AuditRequest

    Raises:
        InvalidRequest: If the URL is missing or an option is malformed
    """
    if isinstance(payload, AuditRequest):
        return payload
    if not isinstance(payload, Mapping):
        raise InvalidRequest("Request body must be a JSON object")
    if not payload.get("url"):
        raise InvalidRequest(MISSING_URL_MESSAGE)

    try:
        return AuditRequest.model_validate(payload)
    except ValidationError as exc:
        error = exc.errors()[0]
        field = ".".join(str(part) for part in error["loc"]) or "request"
        raise InvalidRequest(f"Invalid '{field}': {error['msg']}") from exc


class PageAuditOrchestrator:
    """Runs one audit: session, listeners, navigation, extraction, capture, report.

    The orchestrator holds no per-audit state, so one instance can serve
    concurrent audits; each run owns its session, collector and trace.
    """

    def __init__(
        self,
        sessions: SessionManager,
        assembler: ReportAssembler,
        navigator: Navigator | None = None,
        extractor: SeoExtractor | None = None,
        capturer: ScreenshotCapturer | None = None,
        default_viewport: Viewport | None = None,
        default_full_page: bool = True,
    ):
        """Initialize orchestrator.

        Args:
            sessions: Session manager wrapping the browser backend
            assembler: Report assembler wrapping the screenshot store
            navigator: Navigator (default timeouts when omitted)
            extractor: SEO extractor
            capturer: Screenshot capturer
            default_viewport: Viewport used when the request has none
            default_full_page: Page scope used when the request leaves it unset
        """
        self.sessions = sessions
        self.assembler = assembler
        self.navigator = navigator or Navigator()
        self.extractor = extractor or SeoExtractor()
        self.capturer = capturer or ScreenshotCapturer()
        self.default_viewport = default_viewport or Viewport()
        self.default_full_page = default_full_page

    async def run(
        self,
        request: AuditRequest | Mapping[str, Any],
        trace: AuditTrace | None = None,
    ) -> AuditResult:
        """Run a complete audit.

        Args:
            request: The audit request (validated here when given as a mapping)
            trace: Optional trace receiving the stage history

        Returns:
            Exactly one of AuditReport or AuditError
        """
        trace = trace or AuditTrace()

        try:
            audit_request = parse_request(request)
        except InvalidRequest as exc:
            logger.warning(f"Rejected audit request: {exc.message}")
            trace.advance(AuditStage.FAILED)
            return self.assembler.failure(exc)

        viewport = audit_request.viewport or self.default_viewport
        logger.info(f"Starting audit of {audit_request.url}")
        started = time.perf_counter()

        try:
            async with self.sessions.session(viewport) as session:
                trace.advance(AuditStage.SESSION_ACQUIRED)
                try:
                    report = await self._run_stages(session, audit_request, trace)
                except BaseException:
                    trace.advance(AuditStage.FAILED)
                    raise
        except Exception as exc:
            if trace.stage == AuditStage.FAILED:
                trace.advance(AuditStage.SESSION_RELEASED)
            else:
                # acquisition failed, nothing to release
                trace.advance(AuditStage.FAILED)
            error = self.assembler.failure(exc)
            logger.warning(f"Audit of {audit_request.url} failed ({error.kind}): {error.message}")
            return error

        elapsed = time.perf_counter() - started
        logger.info(f"Audit of {audit_request.url} complete in {elapsed:.2f}s")
        return report

    async def _run_stages(
        self,
        session: BrowserSession,
        request: AuditRequest,
        trace: AuditTrace,
    ) -> AuditReport:
        collector = EventCollector()
        diagnostics = collector.attach(session)
        trace.advance(AuditStage.LISTENERS_ATTACHED)

        outcome = await self.navigator.navigate(session, request.url, request.wait_for_selector)
        collector.drain()
        trace.advance(AuditStage.NAVIGATED)

        seo = await self.extractor.extract(session)
        trace.advance(AuditStage.EXTRACTED)

        full_page = (
            request.full_page if "full_page" in request.model_fields_set else self.default_full_page
        )
        screenshot = await self.capturer.capture(session, full_page=full_page)
        trace.advance(AuditStage.CAPTURED)

        artifact = await self.assembler.persist(screenshot)
        trace.advance(AuditStage.PERSISTED)

        collector.drain()
        report = self.assembler.build_report(request.url, outcome, seo, diagnostics, artifact)
        trace.advance(AuditStage.REPORTED)
        return report


def build_orchestrator(
    config: AuditConfig,
    client: BrowserClient,
    store: ScreenshotStore,
) -> PageAuditOrchestrator:
    """Wire an orchestrator from configuration.

    Args:
        config: Audit configuration
        client: Browser backend injected into the session manager
        store: Screenshot storage collaborator

    Returns:
        Configured PageAuditOrchestrator
    """
    return PageAuditOrchestrator(
        sessions=SessionManager(client, max_sessions=config.browser.max_sessions),
        assembler=ReportAssembler(
            store,
            public_base_url=config.storage.public_base_url,
            key_prefix=config.storage.key_prefix,
        ),
        navigator=Navigator(
            timeout_ms=config.run.navigation_timeout_ms,
            selector_timeout_ms=config.run.selector_timeout_ms,
        ),
        extractor=SeoExtractor(),
        capturer=ScreenshotCapturer(quality=config.run.screenshot_quality),
        default_viewport=config.run.viewport,
        default_full_page=config.run.full_page,
    )


async def run_audit(
    config: AuditConfig,
    request: AuditRequest | Mapping[str, Any],
    client: BrowserClient | None = None,
    store: ScreenshotStore | None = None,
) -> AuditResult:
    """Run a single audit with its own browser backend.

    Args:
        config: Audit configuration
        request: The audit request
        client: Browser backend (created from config and closed afterwards when omitted)
        store: Screenshot store (local directory from config when omitted)

    Returns:
        Exactly one of AuditReport or AuditError
    """
    owns_client = client is None
    if client is None:
        client = create_browser_client(config.browser)
    if store is None:
        store = LocalScreenshotStore(config.storage.out_dir)

    orchestrator = build_orchestrator(config, client, store)
    try:
        return await orchestrator.run(request)
    finally:
        if owns_client:
            await client.close()
