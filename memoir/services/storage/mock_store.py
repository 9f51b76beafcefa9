"""
In-process remote store for deployments without Redis.

Seeded with empty collections for every known journal key so a fresh
deployment reads sensible defaults. Expiry is honoured lazily on access.
"""

import copy
import time
from typing import Any, Callable, Optional

from memoir.models.journal import VaultData
from memoir.models.storage import (
    MEMORIES_KEY,
    MOODS_KEY,
    PHOTOS_KEY,
    SONGS_KEY,
    TODOS_KEY,
    VAULT_KEY,
)
from memoir.services.storage.interface import RemoteStoreInterface


def default_seed() -> dict[str, Any]:
    return {
        MEMORIES_KEY: [],
        MOODS_KEY: {},
        TODOS_KEY: [],
        SONGS_KEY: [],
        PHOTOS_KEY: [],
        VAULT_KEY: VaultData().to_json(),
    }


class MockRemoteStore(RemoteStoreInterface):
    """Dict-backed stand-in for the hosted database. Every call succeeds."""

    def __init__(
        self,
        seed: Optional[dict[str, Any]] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._clock = clock
        self._data: dict[str, Any] = copy.deepcopy(default_seed() if seed is None else seed)
        self._expires: dict[str, float] = {}

    def _expire(self, key: str) -> None:
        deadline = self._expires.get(key)
        if deadline is not None and self._clock() >= deadline:
            self._data.pop(key, None)
            self._expires.pop(key, None)

    async def get(self, key: str) -> Any:
        self._expire(key)
        return copy.deepcopy(self._data.get(key))

    async def set(self, key: str, value: Any, ex: Optional[int] = None) -> bool:
        self._data[key] = copy.deepcopy(value)
        if ex is not None:
            self._expires[key] = self._clock() + ex
        else:
            self._expires.pop(key, None)
        return True

    async def delete(self, key: str) -> int:
        self._expire(key)
        self._expires.pop(key, None)
        if key not in self._data:
            return 0
        del self._data[key]
        return 1

    def snapshot(self) -> dict[str, Any]:
        """Copy of the current contents, expired keys excluded."""
        for key in list(self._expires):
            self._expire(key)
        return copy.deepcopy(self._data)
