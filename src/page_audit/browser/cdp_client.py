"""CDP browser client: connects to a remote Chrome via the DevTools Protocol."""

import logging

from playwright.async_api import Browser, async_playwright

from .playwright_client import PlaywrightBrowserClient

logger = logging.getLogger(__name__)


class CDPBrowserClient(PlaywrightBrowserClient):
    """Client connecting to an external browser over CDP.

    Use this with a browser launched with ``--remote-debugging-port`` or a
    cloud browser service (Browserless, Browserbase and similar). Every audit
    still gets its own context; ``close()`` only detaches Playwright and
    leaves the external browser process running.
    """

    def __init__(self, cdp_endpoint: str):
        super().__init__(headless=True, launch_args=[])
        self.cdp_endpoint = cdp_endpoint

    async def start(self) -> Browser:
        """Connect to the external browser."""
        logger.info(f"Connecting to CDP endpoint: {self.cdp_endpoint}")
        self._playwright = await async_playwright().start()
        try:
            browser: Browser = await self._playwright.chromium.connect_over_cdp(self.cdp_endpoint)
        except Exception:
            await self.close()
            raise
        logger.info("CDP connection established")
        return browser

    async def close(self) -> None:
        """Detach from the external browser (does NOT kill it)."""
        self._browser = None

        if self._playwright:
            try:
                await self._playwright.stop()
            except Exception as e:
                logger.warning(f"Failed to stop playwright: {e}")
            finally:
                self._playwright = None

        logger.info("CDP connection closed")
