"""Factory for creating browser clients based on configuration."""

import logging

from ..core.types import BrowserBackend, BrowserClient, BrowserConfig

logger = logging.getLogger(__name__)


def create_browser_client(config: BrowserConfig) -> BrowserClient:
    """Create a browser client based on the configured backend.

    Args:
        config: Browser backend settings.

    Returns:
        A browser client implementing the ``BrowserClient`` protocol.

    Raises:
        ValueError: If the backend is unknown or misconfigured.
    """
    backend = config.backend

    if backend == BrowserBackend.PLAYWRIGHT:
        from .playwright_client import PlaywrightBrowserClient

        logger.info("Using Playwright browser backend (headless=%s)", config.headless)
        return PlaywrightBrowserClient(headless=config.headless)

    if backend == BrowserBackend.CDP:
        from .cdp_client import CDPBrowserClient

        if not config.cdp_endpoint:
            raise ValueError("CDP backend requires 'cdp_endpoint'")
        logger.info("Using CDP browser backend (endpoint: %s)", config.cdp_endpoint)
        return CDPBrowserClient(cdp_endpoint=config.cdp_endpoint)

    raise ValueError(f"Unknown browser backend: {backend}")
