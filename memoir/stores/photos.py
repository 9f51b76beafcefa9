"""
Photo wall store.

Extra photos (not attached to a memory) are a list of data-URI or URL
strings under ``memoir_photos``. The gallery merges them with the images of
every memory entry.
"""

import base64
import binascii
from dataclasses import dataclass
from typing import Any, Literal, Optional

from memoir.models.storage import PHOTOS_KEY
from memoir.stores.base import DomainStore
from memoir.stores.errors import EntryNotFoundError, PhotoTooLargeError
from memoir.stores.memories import MemoryStore


MAX_PHOTO_BYTES = 1 * 1024 * 1024


def data_uri_size(src: str) -> Optional[int]:
    """Decoded byte size of a base64 data URI, None for plain URLs."""
    if not src.startswith("data:"):
        return None
    header, _, payload = src.partition(",")
    if ";base64" not in header:
        return len(payload.encode("utf-8"))
    try:
        return len(base64.b64decode(payload, validate=False))
    except (binascii.Error, ValueError):
        return len(payload) * 3 // 4


@dataclass(frozen=True)
class GalleryImage:
    """One image on the photo wall and where it came from."""
    src: str
    source: Literal["memory", "extra"]
    index: int
    memory_id: Optional[str] = None


class PhotoStore(DomainStore[list[str]]):
    """Extra photos plus the merged gallery view."""

    default_key = PHOTOS_KEY

    def __init__(self, gateway, key: Optional[str] = None, memories: Optional[MemoryStore] = None):
        super().__init__(gateway, key)
        self._memories = memories or MemoryStore(gateway)

    def default(self) -> list[str]:
        return []

    def parse(self, raw: Any) -> list[str]:
        if not isinstance(raw, list):
            return []
        return [src for src in raw if isinstance(src, str) and src.strip()]

    def dump(self, value: list[str]) -> list[str]:
        return list(value)

    async def add(self, *sources: str, limit_bytes: int = MAX_PHOTO_BYTES) -> list[str]:
        """
        Append photos.

        Raises:
            PhotoTooLargeError: If any data URI decodes to more than
                ``limit_bytes``; nothing is saved in that case
        """
        cleaned = [src.strip() for src in sources if src and src.strip()]
        for src in cleaned:
            size = data_uri_size(src)
            if size is not None and size > limit_bytes:
                raise PhotoTooLargeError(size, limit_bytes)

        photos = await self.load()
        photos.extend(cleaned)
        return await self.save(photos)

    async def remove(self, index: int) -> list[str]:
        photos = await self.load()
        if not 0 <= index < len(photos):
            raise EntryNotFoundError("Photo", str(index))
        del photos[index]
        return await self.save(photos)

    async def gallery(self) -> list[GalleryImage]:
        """Memory images first, in timeline storage order, then extras."""
        memories = await self._memories.load()
        extras = await self.load()

        images = [
            GalleryImage(src=src, source="memory", index=i, memory_id=memory.id)
            for memory in memories
            for i, src in enumerate(memory.images)
        ]
        images.extend(
            GalleryImage(src=src, source="extra", index=i)
            for i, src in enumerate(extras)
        )
        return images

    async def delete_image(self, image: GalleryImage) -> None:
        """Delete a gallery image from whichever store holds it."""
        if image.source == "extra":
            await self.remove(image.index)
            return

        memories = await self._memories.load()
        for memory in memories:
            if memory.id == image.memory_id:
                if not 0 <= image.index < len(memory.images):
                    break
                images = list(memory.images)
                del images[image.index]
                await self._memories.update(memory.id, images=images)
                return
        raise EntryNotFoundError("Photo", image.src[:32])
