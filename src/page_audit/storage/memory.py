"""In-memory screenshot storage."""

from dataclasses import dataclass

from .base import ScreenshotStore


@dataclass(frozen=True)
class StoredObject:
    data: bytes
    content_type: str


class InMemoryScreenshotStore(ScreenshotStore):
    """Keeps screenshots in a dict. Useful for dry runs and tests."""

    def __init__(self) -> None:
        self.objects: dict[str, StoredObject] = {}

    async def put(self, key: str, data: bytes, content_type: str) -> None:
        if key in self.objects:
            raise FileExistsError(f"Storage key already exists: {key}")
        self.objects[key] = StoredObject(data=data, content_type=content_type)

    def keys(self) -> list[str]:
        return list(self.objects)
