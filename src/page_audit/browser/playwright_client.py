"""Playwright-based browser client for page audits."""

import asyncio
import base64
import logging
from typing import Any

from playwright.async_api import (
    Browser,
    BrowserContext,
    Page,
    async_playwright,
)
from playwright.async_api import (
    Error as PlaywrightError,
)

from ..core.types import (
    AttributeLookup,
    PageSignal,
    SignalKind,
    SignalListener,
    Viewport,
)
from .errors import navigation_failure, selector_failure

logger = logging.getLogger(__name__)

LAUNCH_ARGS = [
    "--no-first-run",
    "--no-default-browser-check",
    "--disable-dev-shm-usage",
    "--disable-background-timer-throttling",
    "--disable-backgrounding-occluded-windows",
    "--disable-renderer-backgrounding",
    "--metrics-recording-only",
    "--mute-audio",
    "--password-store=basic",
    "--use-mock-keychain",
]


class PlaywrightPage:
    """A Playwright page wrapped for a single audit.

    Each page lives in its own browser context so concurrent audits never
    share cookies, storage or listeners.
    """

    def __init__(self, context: BrowserContext, page: Page):
        self._context = context
        self._page = page

    def subscribe(self, kind: SignalKind, listener: SignalListener) -> None:
        """Forward one runtime signal channel to ``listener``.

        Args:
            kind: Signal channel to subscribe to
            listener: Non-blocking callable receiving each signal
        """
        if kind == SignalKind.CONSOLE:
            self._page.on(
                "console",
                lambda msg: listener(PageSignal(kind, msg.text, severity=msg.type)),
            )
        elif kind == SignalKind.PAGE_ERROR:
            self._page.on("pageerror", lambda err: listener(PageSignal(kind, err.message)))
        elif kind == SignalKind.REQUEST_FAILED:
            self._page.on(
                "requestfailed",
                lambda request: listener(PageSignal(kind, request.url, reason=request.failure)),
            )
        else:
            raise ValueError(f"Unknown signal kind: {kind}")

    async def goto(self, url: str, timeout_ms: int) -> int | None:
        """Navigate and wait until the network has been idle.

        Args:
            url: URL to navigate to
            timeout_ms: Navigation budget in milliseconds

        Returns:
            Status of the final response, or None when Playwright has none
        """
        logger.info(f"Navigating to {url}")
        try:
            response = await self._page.goto(url, wait_until="networkidle", timeout=timeout_ms)
        except PlaywrightError as exc:
            raise navigation_failure(exc, timeout_ms) from exc
        logger.info(f"Navigated to {self._page.url}")
        return response.status if response is not None else None

    async def wait_for_selector(self, selector: str, timeout_ms: int) -> None:
        """Wait for ``selector`` to be attached to the DOM."""
        try:
            await self._page.wait_for_selector(selector, timeout=timeout_ms, state="attached")
        except PlaywrightError as exc:
            raise selector_failure(exc, selector, timeout_ms) from exc

    async def title(self) -> str:
        return await self._page.title()

    async def query_attribute(self, selector: str, attribute: str) -> AttributeLookup:
        """Read one attribute from the first element matching ``selector``."""
        element = await self._page.query_selector(selector)
        if element is None:
            return AttributeLookup.element_missing()
        value = await element.get_attribute(attribute)
        if value is None:
            return AttributeLookup.attribute_missing()
        return AttributeLookup.found(value)

    async def screenshot(
        self, full_page: bool = True, image_format: str = "webp", quality: int = 80
    ) -> bytes:
        """Capture the page through the DevTools protocol.

        Playwright's own screenshot API only encodes png and jpeg, so webp
        goes through ``Page.captureScreenshot`` directly.

        Args:
            full_page: Capture the full scrollable page
            image_format: DevTools image format (webp, jpeg, png)
            quality: Compression quality (ignored for png)

        Returns:
            Encoded image bytes
        """
        cdp = await self._context.new_cdp_session(self._page)
        try:
            params: dict[str, Any] = {"format": image_format, "fromSurface": True}
            if image_format != "png":
                params["quality"] = quality
            if full_page:
                metrics = await cdp.send("Page.getLayoutMetrics")
                size = metrics.get("cssContentSize") or metrics["contentSize"]
                params["clip"] = {
                    "x": 0,
                    "y": 0,
                    "width": size["width"],
                    "height": size["height"],
                    "scale": 1,
                }
                params["captureBeyondViewport"] = True
            result = await cdp.send("Page.captureScreenshot", params)
        finally:
            try:
                await cdp.detach()
            except PlaywrightError as e:
                logger.debug(f"CDP session already detached: {e}")
        return base64.b64decode(result["data"])

    async def close(self) -> None:
        """Close the page's browser context (and with it the page)."""
        await self._context.close()


class PlaywrightBrowserClient:
    """Launches a local Chromium and hands out one isolated page per audit.

    The browser process is started lazily on the first ``open_page`` call and
    shared by all pages until ``close``.
    """

    def __init__(self, headless: bool = True, launch_args: list[str] | None = None):
        """Initialize Playwright browser client.

        Args:
            headless: Run browser in headless mode
            launch_args: Extra Chromium command line switches
        """
        self.headless = headless
        self.launch_args = launch_args if launch_args is not None else list(LAUNCH_ARGS)
        self._playwright: Any = None
        self._browser: Browser | None = None
        self._lock = asyncio.Lock()

    async def start(self) -> Browser:
        """Start Playwright and launch Chromium."""
        logger.info("Launching Playwright browser...")
        self._playwright = await async_playwright().start()
        try:
            browser: Browser = await self._playwright.chromium.launch(
                headless=self.headless, args=self.launch_args
            )
        except Exception:
            await self.close()
            raise
        logger.info("Playwright browser launched")
        return browser

    async def _ensure_browser(self) -> Browser:
        async with self._lock:
            if self._browser is None or not self._browser.is_connected():
                if self._browser is not None:
                    logger.warning("Browser disconnected -- restarting")
                    await self.close()
                self._browser = await self.start()
            return self._browser

    async def open_page(self, viewport: Viewport) -> PlaywrightPage:
        """Open a fresh context and page sized to ``viewport``."""
        browser = await self._ensure_browser()
        context = await browser.new_context(
            viewport={"width": viewport.width, "height": viewport.height}
        )
        try:
            page = await context.new_page()
        except PlaywrightError:
            await context.close()
            raise
        return PlaywrightPage(context, page)

    async def close_page(self, page: PlaywrightPage) -> None:
        await page.close()

    def is_browser_alive(self) -> bool:
        """Check whether the browser process is still connected."""
        if not self._browser:
            return False
        try:
            return self._browser.is_connected()
        except Exception:
            return False

    async def close(self) -> None:
        """Close browser and stop Playwright.

        Each resource is closed independently so a failure in one
        does not prevent cleanup of the others.
        """
        if self._browser:
            try:
                await self._browser.close()
            except Exception as e:
                logger.warning(f"Failed to close browser: {e}")
            finally:
                self._browser = None

        if self._playwright:
            try:
                await self._playwright.stop()
            except Exception as e:
                logger.warning(f"Failed to stop playwright: {e}")
            finally:
                self._playwright = None

        logger.info("Playwright browser closed")
