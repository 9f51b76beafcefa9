"""
Platform Storage Implementations

Concrete string maps for the local cache:

- MemoryPlatformStorage: process memory, for tests and ephemeral sessions
- FilePlatformStorage: a JSON file on disk, the persistent default
- NullPlatformStorage: no local storage at all (reads empty, writes ignored)

Quota accounting follows browsers: the sum of key and value lengths.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Iterator, Optional, Union

import structlog

from memoir.services.storage.interface import (
    PlatformStorage,
    StorageError,
    StorageQuotaExceededError,
)


DEFAULT_QUOTA_BYTES = 5 * 1024 * 1024

logger = structlog.get_logger(__name__)


def _entry_size(key: str, value: str) -> int:
    return len(key.encode("utf-8")) + len(value.encode("utf-8"))


class MemoryPlatformStorage(PlatformStorage):
    """In-process storage with an optional quota."""

    def __init__(self, quota_bytes: Optional[int] = None):
        self._items: dict[str, str] = {}
        self._quota_bytes = quota_bytes

    def _check_quota(self, key: str, value: str) -> None:
        if self._quota_bytes is None:
            return
        used = sum(_entry_size(k, v) for k, v in self._items.items() if k != key)
        if used + _entry_size(key, value) > self._quota_bytes:
            raise StorageQuotaExceededError(
                f"Writing {key} would exceed the {self._quota_bytes} byte quota"
            )

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._check_quota(key, value)
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def keys(self) -> Iterator[str]:
        return iter(list(self._items))

    def clear(self) -> None:
        self._items.clear()


class FilePlatformStorage(MemoryPlatformStorage):
    """
    Storage persisted to a single JSON file.

    The whole map is loaded once and rewritten atomically (temp file plus
    rename) on every change. A file that cannot be parsed is logged and
    treated as empty; it is replaced on the next write.
    """

    def __init__(
        self,
        path: Union[str, Path],
        quota_bytes: Optional[int] = DEFAULT_QUOTA_BYTES,
    ):
        super().__init__(quota_bytes=quota_bytes)
        self._path = Path(path)
        self._items = self._read_file()

    @property
    def path(self) -> Path:
        return self._path

    def _read_file(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.error("platform_storage_unreadable", path=str(self._path), error=str(e))
            return {}
        if not isinstance(data, dict):
            logger.error("platform_storage_unreadable", path=str(self._path), error="not an object")
            return {}
        return {k: v for k, v in data.items() if isinstance(k, str) and isinstance(v, str)}

    def _flush(self) -> None:
        tmp_path = None
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                prefix=f".{self._path.name}.", dir=str(self._path.parent)
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(self._items, f, ensure_ascii=False)
            os.replace(tmp_path, self._path)
        except (OSError, TypeError, ValueError) as e:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise StorageError(f"Failed to write {self._path}: {e}") from e

    def set_item(self, key: str, value: str) -> None:
        previous = self._items.get(key)
        super().set_item(key, value)
        try:
            self._flush()
        except StorageError:
            # Keep memory and disk in agreement
            if previous is None:
                self._items.pop(key, None)
            else:
                self._items[key] = previous
            raise

    def remove_item(self, key: str) -> None:
        if key not in self._items:
            return
        previous = self._items[key]
        super().remove_item(key)
        try:
            self._flush()
        except StorageError:
            self._items[key] = previous
            raise

    def clear(self) -> None:
        previous = dict(self._items)
        super().clear()
        try:
            self._flush()
        except StorageError:
            self._items = previous
            raise


class NullPlatformStorage(PlatformStorage):
    """Storage for contexts without any local persistence."""

    @property
    def is_available(self) -> bool:
        return False

    def get_item(self, key: str) -> Optional[str]:
        return None

    def set_item(self, key: str, value: str) -> None:
        return None

    def remove_item(self, key: str) -> None:
        return None

    def keys(self) -> Iterator[str]:
        return iter(())
