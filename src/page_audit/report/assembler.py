"""Builds the terminal result of an audit."""

import logging
from uuid import uuid4

from ..core.errors import PersistenceFailed, failure_kind, failure_message
from ..core.types import (
    WEBP_MIME_TYPE,
    AuditError,
    AuditReport,
    DiagnosticLog,
    NavigationOutcome,
    ScreenshotArtifact,
    SeoMetadata,
)
from ..storage.base import ScreenshotStore

logger = logging.getLogger(__name__)


class ReportAssembler:
    """Persists the screenshot and merges stage outputs into one result."""

    def __init__(self, store: ScreenshotStore, public_base_url: str, key_prefix: str = "audits"):
        """Initialize the assembler.

        Args:
            store: Storage collaborator for screenshots
            public_base_url: Base URL under which stored keys are served
            key_prefix: Prefix for generated storage keys
        """
        self.store = store
        self.public_base_url = public_base_url.rstrip("/")
        self.key_prefix = key_prefix.strip("/")

    def new_storage_key(self) -> str:
        """Generate a fresh, never reused storage key."""
        name = f"{uuid4()}.webp"
        return f"{self.key_prefix}/{name}" if self.key_prefix else name

    def public_url(self, key: str) -> str:
        return f"{self.public_base_url}/{key}"

    async def persist(self, data: bytes) -> ScreenshotArtifact:
        """Store the screenshot under a fresh key.

        Raises:
            PersistenceFailed: If the storage collaborator fails
        """
        key = self.new_storage_key()
        try:
            await self.store.put(key, data, WEBP_MIME_TYPE)
        except Exception as exc:
            raise PersistenceFailed(f"Failed to store screenshot {key}: {exc}") from exc
        return ScreenshotArtifact(data=data, storage_key=key, url=self.public_url(key))

    def build_report(
        self,
        url: str,
        outcome: NavigationOutcome,
        seo: SeoMetadata,
        diagnostics: DiagnosticLog,
        artifact: ScreenshotArtifact,
    ) -> AuditReport:
        return AuditReport(
            url=url,
            http_status=outcome.http_status,
            load_time_ms=outcome.load_time_ms,
            seo=seo,
            diagnostics=diagnostics,
            screenshot_url=artifact.url,
        )

    def failure(self, exc: BaseException) -> AuditError:
        """Convert any failure into an AuditError."""
        return AuditError(message=failure_message(exc), kind=failure_kind(exc))
