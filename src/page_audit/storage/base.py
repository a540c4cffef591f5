"""Storage interface for screenshot artifacts."""

from abc import ABC, abstractmethod


class ScreenshotStore(ABC):
    """Object storage for audit screenshots."""

    @abstractmethod
    async def put(self, key: str, data: bytes, content_type: str) -> None:
        """Persist ``data`` under ``key``.

        Implementations must refuse to overwrite an existing key.
        """
