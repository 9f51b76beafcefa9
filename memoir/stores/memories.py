"""
Memory timeline store.

Entries live in one list under ``memoir_memories``. At most one entry is
pinned; the timeline order is pinned first, then newest day first, then
newest written first.
"""

from datetime import date
from typing import Any, Optional

from memoir.models.journal import Comment, Identity, MemoryEntry
from memoir.models.storage import MEMORIES_KEY
from memoir.stores.base import ModelListStore
from memoir.stores.errors import DomainValidationError, EntryNotFoundError


def timeline_order(entries: list[MemoryEntry]) -> list[MemoryEntry]:
    """Sort entries for display without mutating the input."""
    def sort_key(entry: MemoryEntry):
        day = entry.day or date.min
        return (not entry.pinned, -day.toordinal(), -entry.created_at)

    return sorted(entries, key=sort_key)


class MemoryStore(ModelListStore[MemoryEntry]):
    """Timeline of shared memories."""

    default_key = MEMORIES_KEY
    model = MemoryEntry

    async def ordered(self) -> list[MemoryEntry]:
        return timeline_order(await self.load())

    async def add(
        self,
        date: str,
        title: str = "",
        text: str = "",
        images: Optional[list[str]] = None,
        identity: Optional[Identity] = None,
    ) -> MemoryEntry:
        """
        Append a new memory.

        Raises:
            DomainValidationError: If the date is blank or the entry has
                no title, text or image
        """
        images = [img.strip() for img in images or [] if img and img.strip()]
        if not date.strip():
            raise DomainValidationError("A memory needs a date")
        if not (title.strip() or text.strip() or images):
            raise DomainValidationError("A memory needs a title, text or an image")

        entry = MemoryEntry(
            date=date,
            title=title,
            text=text,
            images=images,
            identity=identity,
        )
        memories = await self.load()
        memories.append(entry)
        await self.save(memories)
        return entry

    async def update(self, entry_id: str, **changes: Any) -> MemoryEntry:
        """Apply field changes to one entry."""
        memories = await self.load()
        idx = self._index_of(memories, entry_id)
        if idx is None:
            raise EntryNotFoundError("Memory", entry_id)

        changed = memories[idx].model_copy(update=changes)
        memories[idx] = MemoryEntry.model_validate(changed.to_json())
        await self.save(memories)
        return memories[idx]

    async def delete(self, entry_id: str) -> bool:
        """Remove one entry. Returns False if it did not exist."""
        memories = await self.load()
        remaining = [m for m in memories if m.id != entry_id]
        if len(remaining) == len(memories):
            return False
        await self.save(remaining)
        return True

    async def toggle_pin(self, entry_id: str) -> MemoryEntry:
        """Pin or unpin an entry. Pinning unpins every other entry."""
        memories = await self.load()
        idx = self._index_of(memories, entry_id)
        if idx is None:
            raise EntryNotFoundError("Memory", entry_id)

        pin = not memories[idx].pinned
        for i, memory in enumerate(memories):
            if i == idx:
                memory.pinned = pin
            elif pin:
                memory.pinned = False
        await self.save(memories)
        return memories[idx]

    async def add_comment(self, entry_id: str, identity: Identity, text: str) -> Comment:
        if not text.strip():
            raise DomainValidationError("Comment text cannot be empty")

        memories = await self.load()
        idx = self._index_of(memories, entry_id)
        if idx is None:
            raise EntryNotFoundError("Memory", entry_id)

        comment = Comment(identity=identity, text=text)
        memories[idx].comments.append(comment)
        await self.save(memories)
        return comment

    async def delete_comment(self, entry_id: str, comment_id: str) -> bool:
        memories = await self.load()
        idx = self._index_of(memories, entry_id)
        if idx is None:
            raise EntryNotFoundError("Memory", entry_id)

        comments = memories[idx].comments
        kept = [c for c in comments if c.id != comment_id]
        if len(kept) == len(comments):
            return False
        memories[idx].comments = kept
        await self.save(memories)
        return True
