"""SEO metadata extraction from a settled page."""

import logging

from ..browser.session import BrowserSession
from ..core.errors import AuditFailure, ExtractionFailed
from ..core.types import AttributeLookup, SeoMetadata

logger = logging.getLogger(__name__)

META_DESCRIPTION_SELECTOR = 'meta[name="description"]'


class SeoExtractor:
    """Reads the document title and meta description.

    The title is mandatory: failing to read it fails the audit. The meta
    description is best-effort and degrades to ``None``.
    """

    async def extract(self, session: BrowserSession) -> SeoMetadata:
        """Extract SEO metadata from the session's page.

        Raises:
            ExtractionFailed: If the title cannot be read
        """
        try:
            title = await session.page.title()
        except AuditFailure:
            raise
        except Exception as exc:
            raise ExtractionFailed(f"Title extraction failed: {exc}") from exc

        description = await self.lookup_description(session)
        if not description.present:
            logger.debug(f"Meta description unavailable: {description.status.value}")

        return SeoMetadata(title=title, meta_description=description.value)

    async def lookup_description(self, session: BrowserSession) -> AttributeLookup:
        """Look up ``<meta name="description" content="...">``.

        Never raises; a crashed lookup is reported as ``LookupStatus.FAILED``.
        """
        try:
            return await session.page.query_attribute(META_DESCRIPTION_SELECTOR, "content")
        except Exception as exc:
            return AttributeLookup.failed(str(exc) or type(exc).__name__)
