"""Browser session lifecycle: one exclusive page per audit."""

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from uuid import uuid4

from ..core.errors import SessionUnavailable
from ..core.types import BrowserClient, BrowserPage, Viewport
from .errors import first_line

logger = logging.getLogger(__name__)


class BrowserSession:
    """Exclusive handle to one browser page for the lifetime of one audit."""

    def __init__(self, page: BrowserPage, session_id: str | None = None):
        self.page = page
        self.id = session_id or uuid4().hex[:12]
        self.released = False

    def __repr__(self) -> str:
        return f"BrowserSession(id={self.id!r}, released={self.released})"


class SessionManager:
    """Acquires and releases browser sessions on an injected backend.

    Release is idempotent and always hands the concurrency slot back, so a
    session leaks neither its page nor its slot on any exit path.
    """

    def __init__(self, client: BrowserClient, max_sessions: int | None = None):
        """Initialize the session manager.

        Args:
            client: Browser backend that opens and closes pages
            max_sessions: Optional bound on concurrently open sessions
        """
        self.client = client
        self.max_sessions = max_sessions
        self._slots = asyncio.Semaphore(max_sessions) if max_sessions else None

    async def acquire(self, viewport: Viewport) -> BrowserSession:
        """Open a new session sized to ``viewport``.

        Raises:
            SessionUnavailable: If the backend cannot launch or open a page
        """
        if self._slots is not None:
            await self._slots.acquire()
        try:
            page = await self.client.open_page(viewport)
        except BaseException as exc:
            # the slot goes back on cancellation too
            if self._slots is not None:
                self._slots.release()
            if not isinstance(exc, Exception):
                raise
            reason = first_line(exc) or type(exc).__name__
            raise SessionUnavailable(f"Browser session unavailable: {reason}") from exc

        session = BrowserSession(page)
        logger.debug(f"Acquired browser session {session.id} ({viewport.width}x{viewport.height})")
        return session

    async def release(self, session: BrowserSession) -> None:
        """Close the session's page. Safe to call more than once."""
        if session.released:
            return
        session.released = True
        try:
            await self.client.close_page(session.page)
        except Exception as e:
            logger.warning(f"Failed to close browser session {session.id}: {e}")
        finally:
            if self._slots is not None:
                self._slots.release()
        logger.debug(f"Released browser session {session.id}")

    @asynccontextmanager
    async def session(self, viewport: Viewport) -> AsyncIterator[BrowserSession]:
        """Scoped acquisition with guaranteed release."""
        session = await self.acquire(viewport)
        try:
            yield session
        finally:
            await self.release(session)
