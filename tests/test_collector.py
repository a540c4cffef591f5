"""Tests for runtime signal collection."""

from page_audit.browser.session import BrowserSession
from page_audit.core.collector import EventCollector
from page_audit.core.types import PageSignal, SignalKind
from tests.helpers import FakePage


def _attached() -> tuple[FakePage, EventCollector]:
    page = FakePage()
    collector = EventCollector()
    collector.attach(BrowserSession(page))
    return page, collector


def test_attach_subscribes_every_channel():
    page, _ = _attached()

    assert set(page.listeners) == set(SignalKind)
    assert all(len(listeners) == 1 for listeners in page.listeners.values())


def test_console_keeps_only_errors_and_warnings():
    page, collector = _attached()

    page.emit(PageSignal(SignalKind.CONSOLE, "hello", severity="log"))
    page.emit(PageSignal(SignalKind.CONSOLE, "deprecated API", severity="warning"))
    page.emit(PageSignal(SignalKind.CONSOLE, "boom", severity="error"))
    page.emit(PageSignal(SignalKind.CONSOLE, "details", severity="info"))

    log = collector.drain()

    assert log.console_warnings_and_errors == ["[WARNING] deprecated API", "[ERROR] boom"]


def test_page_errors_are_recorded_verbatim():
    page, collector = _attached()

    page.emit(PageSignal(SignalKind.PAGE_ERROR, "TypeError: undefined is not a function"))

    assert collector.drain().uncaught_page_errors == ["TypeError: undefined is not a function"]


def test_failed_requests_include_reason():
    page, collector = _attached()

    page.emit(
        PageSignal(SignalKind.REQUEST_FAILED, "https://cdn.example.com/a.js", reason="net::ERR_FAILED")
    )
    page.emit(PageSignal(SignalKind.REQUEST_FAILED, "https://cdn.example.com/b.css"))

    assert collector.drain().failed_network_requests == [
        "https://cdn.example.com/a.js - net::ERR_FAILED",
        "https://cdn.example.com/b.css - ",
    ]


def test_drain_preserves_arrival_order_and_is_repeatable():
    page, collector = _attached()

    page.emit(PageSignal(SignalKind.PAGE_ERROR, "first"))
    collector.drain()
    page.emit(PageSignal(SignalKind.PAGE_ERROR, "second"))
    page.emit(PageSignal(SignalKind.PAGE_ERROR, "third"))
    log = collector.drain()

    assert log.uncaught_page_errors == ["first", "second", "third"]
    assert collector.drain() is log


def test_log_is_empty_without_signals():
    _, collector = _attached()

    log = collector.drain()

    assert log.console_warnings_and_errors == []
    assert log.uncaught_page_errors == []
    assert log.failed_network_requests == []
