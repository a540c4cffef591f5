"""Screenshot artifact storage."""

from .base import ScreenshotStore
from .local import LocalScreenshotStore
from .memory import InMemoryScreenshotStore

__all__ = ["InMemoryScreenshotStore", "LocalScreenshotStore", "ScreenshotStore"]
