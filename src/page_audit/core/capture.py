"""Screenshot capture."""

import logging

from ..browser.session import BrowserSession
from .errors import AuditFailure, CaptureFailed

logger = logging.getLogger(__name__)

SCREENSHOT_FORMAT = "webp"


class ScreenshotCapturer:
    """Captures one webp screenshot per audit."""

    def __init__(self, quality: int = 80):
        self.quality = quality

    async def capture(self, session: BrowserSession, full_page: bool = True) -> bytes:
        """Capture the session's page.

        Args:
            session: Session whose page is captured
            full_page: Capture the full scrollable page instead of the viewport

        Returns:
            Encoded webp bytes

        Raises:
            CaptureFailed: If the backend fails or returns no data
        """
        try:
            data = await session.page.screenshot(
                full_page=full_page, image_format=SCREENSHOT_FORMAT, quality=self.quality
            )
        except AuditFailure:
            raise
        except Exception as exc:
            raise CaptureFailed(f"Screenshot capture failed: {exc}") from exc

        if not data:
            raise CaptureFailed("Screenshot capture returned no data")

        logger.debug(f"Captured {len(data)} byte screenshot (full_page={full_page})")
        return data
