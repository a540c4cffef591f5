"""Filesystem-backed screenshot storage."""

import asyncio
import logging
from pathlib import Path

from .base import ScreenshotStore

logger = logging.getLogger(__name__)


class LocalScreenshotStore(ScreenshotStore):
    """Writes screenshots below a root directory, one file per key."""

    def __init__(self, root: Path | str):
        self.root = Path(root)

    def path_for(self, key: str) -> Path:
        """Resolve ``key`` to a path inside the root directory.

        Raises:
            ValueError: If the key escapes the root directory
        """
        root = self.root.resolve()
        path = (root / key).resolve()
        if root not in path.parents:
            raise ValueError(f"Storage key escapes storage root: {key}")
        return path

    async def put(self, key: str, data: bytes, content_type: str) -> None:
        path = self.path_for(key)
        await asyncio.to_thread(self._write, path, data)
        logger.info(f"Stored {content_type} artifact ({len(data)} bytes) at {path}")

    @staticmethod
    def _write(path: Path, data: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        # "xb" fails if the key was already written
        with open(path, "xb") as f:
            f.write(data)
