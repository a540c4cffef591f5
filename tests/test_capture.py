"""Tests for screenshot capture."""

import pytest

from page_audit.browser.session import BrowserSession
from page_audit.core.capture import ScreenshotCapturer
from page_audit.core.errors import CaptureFailed
from tests.helpers import WEBP_BYTES, FakePage


async def test_capture_requests_webp_at_quality():
    page = FakePage()

    data = await ScreenshotCapturer().capture(BrowserSession(page))

    assert data == WEBP_BYTES
    assert page.screenshot_args == {"full_page": True, "image_format": "webp", "quality": 80}


async def test_capture_viewport_only():
    page = FakePage()

    await ScreenshotCapturer(quality=60).capture(BrowserSession(page), full_page=False)

    assert page.screenshot_args == {"full_page": False, "image_format": "webp", "quality": 60}


async def test_backend_error_becomes_capture_failed():
    page = FakePage(fail={"screenshot": RuntimeError("Target crashed")})

    with pytest.raises(CaptureFailed) as exc_info:
        await ScreenshotCapturer().capture(BrowserSession(page))

    assert exc_info.value.message == "Screenshot capture failed: Target crashed"


async def test_empty_screenshot_fails():
    with pytest.raises(CaptureFailed):
        await ScreenshotCapturer().capture(BrowserSession(FakePage(screenshot=b"")))
