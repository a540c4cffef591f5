"""Navigation with bounded readiness and selector waits."""

import asyncio
import logging
import time

from ..browser.errors import first_line
from ..browser.session import BrowserSession
from .errors import AuditFailure, NavigationFailed, NavigationTimeout, SelectorTimeout
from .types import NavigationOutcome

logger = logging.getLogger(__name__)

DEFAULT_STATUS = 200


class Navigator:
    """Drives a session's page to a URL and waits for network idle.

    The backend applies its own timeout as well; ``asyncio.wait_for`` bounds
    the stage regardless of how the backend honours it.
    """

    def __init__(self, timeout_ms: int = 30000, selector_timeout_ms: int = 5000):
        self.timeout_ms = timeout_ms
        self.selector_timeout_ms = selector_timeout_ms

    async def navigate(
        self,
        session: BrowserSession,
        url: str,
        wait_for_selector: str | None = None,
    ) -> NavigationOutcome:
        """Navigate to ``url`` and measure the time to readiness.

        Args:
            session: Session whose page is driven
            url: Target URL
            wait_for_selector: Selector that must appear after readiness

        Returns:
            NavigationOutcome; ``load_time_ms`` excludes the selector wait

        Raises:
            NavigationTimeout: Network idle not reached in time
            NavigationFailed: Any other navigation failure
            SelectorTimeout: The selector did not appear in time
        """
        started = time.perf_counter()
        try:
            status = await asyncio.wait_for(
                session.page.goto(url, timeout_ms=self.timeout_ms),
                timeout=self.timeout_ms / 1000,
            )
        except asyncio.TimeoutError as exc:
            raise NavigationTimeout(f"Navigation timeout of {self.timeout_ms} ms exceeded") from exc
        except AuditFailure:
            raise
        except Exception as exc:
            raise NavigationFailed(str(exc) or f"Navigation to {url} failed") from exc
        load_time_ms = int((time.perf_counter() - started) * 1000)
        logger.debug(f"Network idle after {load_time_ms} ms (status={status})")

        if wait_for_selector:
            await self.wait_for(session, wait_for_selector)

        return NavigationOutcome(
            http_status=status or DEFAULT_STATUS,
            load_time_ms=load_time_ms,
        )

    async def wait_for(self, session: BrowserSession, selector: str) -> None:
        """Wait up to ``selector_timeout_ms`` for ``selector`` to appear."""
        try:
            await asyncio.wait_for(
                session.page.wait_for_selector(selector, timeout_ms=self.selector_timeout_ms),
                timeout=self.selector_timeout_ms / 1000,
            )
        except asyncio.TimeoutError as exc:
            raise SelectorTimeout(
                f"Waiting for selector `{selector}` failed: {self.selector_timeout_ms} ms exceeded"
            ) from exc
        except AuditFailure:
            raise
        except Exception as exc:
            reason = first_line(exc) or type(exc).__name__
            raise SelectorTimeout(f"Waiting for selector `{selector}` failed: {reason}") from exc
        logger.debug(f"Selector {selector} appeared")
