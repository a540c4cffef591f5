"""Tests for navigation and selector waits."""

import time

import pytest

from page_audit.browser.session import BrowserSession
from page_audit.core.errors import NavigationFailed, NavigationTimeout, SelectorTimeout
from page_audit.core.navigator import Navigator
from tests.helpers import FakePage


async def test_navigate_returns_status_and_load_time():
    session = BrowserSession(FakePage(status=404))

    outcome = await Navigator().navigate(session, "https://example.com/missing")

    assert outcome.http_status == 404
    assert outcome.load_time_ms >= 0


async def test_missing_response_falls_back_to_200():
    session = BrowserSession(FakePage(status=None))

    outcome = await Navigator().navigate(session, "https://example.com")

    assert outcome.http_status == 200


async def test_load_time_excludes_selector_wait():
    page = FakePage(goto_delay=0.1, selector_delay=0.5)
    session = BrowserSession(page)

    outcome = await Navigator().navigate(session, "https://example.com", "#root")

    assert 90 <= outcome.load_time_ms < 450
    assert page.calls == ["goto", "wait_for_selector"]


async def test_no_selector_wait_without_selector():
    page = FakePage()

    await Navigator().navigate(BrowserSession(page), "https://example.com")

    assert "wait_for_selector" not in page.calls


async def test_slow_page_times_out():
    session = BrowserSession(FakePage(goto_delay=2.0))

    with pytest.raises(NavigationTimeout) as exc_info:
        await Navigator(timeout_ms=50).navigate(session, "https://slow.example.com")

    assert exc_info.value.message == "Navigation timeout of 50 ms exceeded"


async def test_transport_error_becomes_navigation_failed():
    page = FakePage(fail={"goto": RuntimeError("net::ERR_NAME_NOT_RESOLVED at https://nope.invalid/")})

    with pytest.raises(NavigationFailed) as exc_info:
        await Navigator().navigate(BrowserSession(page), "https://nope.invalid/")

    assert "ERR_NAME_NOT_RESOLVED" in exc_info.value.message


async def test_backend_failures_pass_through():
    page = FakePage(fail={"goto": NavigationTimeout("Navigation timeout of 30000 ms exceeded")})

    with pytest.raises(NavigationTimeout):
        await Navigator().navigate(BrowserSession(page), "https://example.com")


async def test_missing_selector_fails_within_selector_budget():
    """A missing selector fails after the selector timeout, not the navigation one."""
    session = BrowserSession(FakePage(selector_present=False))
    navigator = Navigator(timeout_ms=30000, selector_timeout_ms=100)

    started = time.perf_counter()
    with pytest.raises(SelectorTimeout) as exc_info:
        await navigator.navigate(session, "https://example.com", "#never")
    elapsed = time.perf_counter() - started

    assert elapsed < 2
    assert "#never" in exc_info.value.message


async def test_selector_wait_error_is_selector_timeout():
    page = FakePage(fail={"wait_for_selector": RuntimeError("Target closed\nCall log:")})

    with pytest.raises(SelectorTimeout) as exc_info:
        await Navigator().navigate(BrowserSession(page), "https://example.com", "#root")

    assert exc_info.value.message == "Waiting for selector `#root` failed: Target closed"
