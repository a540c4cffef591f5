"""Fake browser backend with fault injection for engine tests."""

import asyncio
from collections import defaultdict
from typing import Any

from page_audit.browser.session import SessionManager
from page_audit.core.navigator import Navigator
from page_audit.core.orchestrator import PageAuditOrchestrator
from page_audit.core.types import AttributeLookup, PageSignal, SignalKind, Viewport
from page_audit.report.assembler import ReportAssembler
from page_audit.storage.base import ScreenshotStore
from page_audit.storage.memory import InMemoryScreenshotStore

WEBP_BYTES = b"RIFF\x1a\x00\x00\x00WEBPVP8 fake"
PUBLIC_BASE_URL = "https://cdn.example.com"


class FakePage:
    """In-memory BrowserPage.

    ``fail`` maps an operation name (goto, wait_for_selector, title,
    query_attribute, screenshot) to the exception it raises.
    """

    def __init__(
        self,
        status: int | None = 200,
        title: str = "Example Domain",
        description: str | None = "An example page",
        description_attribute: bool = True,
        goto_delay: float = 0.0,
        selector_delay: float = 0.0,
        selector_present: bool = True,
        screenshot: bytes = WEBP_BYTES,
        signals_during_goto: list[PageSignal] | None = None,
        fail: dict[str, Exception] | None = None,
    ):
        self.status = status
        self._title = title
        self.description = description
        self.description_attribute = description_attribute
        self.goto_delay = goto_delay
        self.selector_delay = selector_delay
        self.selector_present = selector_present
        self.screenshot_bytes = screenshot
        self.signals_during_goto = signals_during_goto or []
        self.fail = fail or {}
        self.listeners: dict[SignalKind, list[Any]] = defaultdict(list)
        self.calls: list[str] = []
        self.viewport: Viewport | None = None
        self.screenshot_args: dict[str, Any] | None = None

    def _maybe_fail(self, operation: str) -> None:
        self.calls.append(operation)
        if operation in self.fail:
            raise self.fail[operation]

    def subscribe(self, kind: SignalKind, listener: Any) -> None:
        self.calls.append(f"subscribe:{kind.value}")
        self.listeners[kind].append(listener)

    def emit(self, signal: PageSignal) -> None:
        for listener in self.listeners[signal.kind]:
            listener(signal)

    async def goto(self, url: str, timeout_ms: int) -> int | None:
        self._maybe_fail("goto")
        for signal in self.signals_during_goto:
            self.emit(signal)
        await asyncio.sleep(self.goto_delay)
        return self.status

    async def wait_for_selector(self, selector: str, timeout_ms: int) -> None:
        self._maybe_fail("wait_for_selector")
        if not self.selector_present:
            await asyncio.sleep(3600)
        await asyncio.sleep(self.selector_delay)

    async def title(self) -> str:
        self._maybe_fail("title")
        return self._title

    async def query_attribute(self, selector: str, attribute: str) -> AttributeLookup:
        self._maybe_fail("query_attribute")
        if self.description is None:
            return AttributeLookup.element_missing()
        if not self.description_attribute:
            return AttributeLookup.attribute_missing()
        return AttributeLookup.found(self.description)

    async def screenshot(self, full_page: bool, image_format: str, quality: int) -> bytes:
        self._maybe_fail("screenshot")
        self.screenshot_args = {
            "full_page": full_page,
            "image_format": image_format,
            "quality": quality,
        }
        return self.screenshot_bytes


class FakeBrowserClient:
    """BrowserClient handing out FakePage instances and recording releases."""

    def __init__(
        self, open_error: Exception | None = None, open_delay: float = 0.0, **page_options: Any
    ):
        self.open_error = open_error
        self.open_delay = open_delay
        self.page_options = page_options
        self.open_calls = 0
        self.opened: list[FakePage] = []
        self.closed: list[FakePage] = []
        self.client_closed = False

    async def open_page(self, viewport: Viewport) -> FakePage:
        self.open_calls += 1
        await asyncio.sleep(self.open_delay)
        if self.open_error is not None:
            raise self.open_error
        page = FakePage(**self.page_options)
        page.viewport = viewport
        self.opened.append(page)
        return page

    async def close_page(self, page: FakePage) -> None:
        self.closed.append(page)

    async def close(self) -> None:
        self.client_closed = True


class FailingStore(ScreenshotStore):
    """Store whose writes always fail."""

    async def put(self, key: str, data: bytes, content_type: str) -> None:
        raise OSError("bucket unavailable")


def make_orchestrator(
    client: FakeBrowserClient,
    store: ScreenshotStore | None = None,
    timeout_ms: int = 30000,
    selector_timeout_ms: int = 5000,
) -> PageAuditOrchestrator:
    """Wire an orchestrator around fakes."""
    return PageAuditOrchestrator(
        sessions=SessionManager(client),
        assembler=ReportAssembler(store or InMemoryScreenshotStore(), PUBLIC_BASE_URL),
        navigator=Navigator(timeout_ms=timeout_ms, selector_timeout_ms=selector_timeout_ms),
    )
