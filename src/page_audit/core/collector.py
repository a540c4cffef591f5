"""Runtime signal collection for a single audit."""

import asyncio
import logging

from ..browser.session import BrowserSession
from .types import DiagnosticLog, PageSignal, SignalKind

logger = logging.getLogger(__name__)

RECORDED_CONSOLE_SEVERITIES = frozenset({"error", "warning"})


class EventCollector:
    """Collects console, page-error and failed-request signals into a DiagnosticLog.

    Each signal kind has its own queue. Browser listeners only enqueue, so
    they never block navigation and may fire any number of times; ``drain``
    moves queued signals into the log in arrival order.
    """

    def __init__(self) -> None:
        self._channels: dict[SignalKind, asyncio.Queue[PageSignal]] = {
            kind: asyncio.Queue() for kind in SignalKind
        }
        self.log = DiagnosticLog()

    def attach(self, session: BrowserSession) -> DiagnosticLog:
        """Subscribe to every signal channel of ``session``.

        Must be called before navigation starts, otherwise signals fired
        during page load are lost.

        Returns:
            The log that ``drain`` fills
        """
        for kind, queue in self._channels.items():
            session.page.subscribe(kind, queue.put_nowait)
        return self.log

    def drain(self) -> DiagnosticLog:
        """Move every queued signal into the log."""
        for kind, queue in self._channels.items():
            while not queue.empty():
                self._record(kind, queue.get_nowait())
        return self.log

    def _record(self, kind: SignalKind, signal: PageSignal) -> None:
        if kind == SignalKind.CONSOLE:
            severity = (signal.severity or "").lower()
            if severity in RECORDED_CONSOLE_SEVERITIES:
                self.log.console_warnings_and_errors.append(f"[{severity.upper()}] {signal.text}")
        elif kind == SignalKind.PAGE_ERROR:
            self.log.uncaught_page_errors.append(signal.text)
        elif kind == SignalKind.REQUEST_FAILED:
            self.log.failed_network_requests.append(f"{signal.text} - {signal.reason or ''}")
        else:
            logger.debug(f"Ignoring signal of unknown kind: {kind}")
