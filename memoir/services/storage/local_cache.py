"""
Local Cache

JSON values on top of a PlatformStorage string map.

The cache never raises to its callers:
- load() returns the caller's fallback for anything missing, unparsable or
  of the wrong container type, and purges entries that are corrupt
- save() logs and swallows serialisation, quota and I/O failures

Container-shape rule: a list fallback only accepts a stored list, a dict
fallback only accepts a stored dict. Scalar fallbacks accept any value.
"""

import json
from typing import Any, Optional, TypeVar

import structlog

from memoir.services.storage.interface import PlatformStorage
from memoir.services.storage.platform import NullPlatformStorage


T = TypeVar("T")

# Raw strings a careless writer may have stored for "no value"
_EMPTY_SENTINELS = frozenset({"", "undefined", "null"})

logger = structlog.get_logger(__name__)


def shape_matches(value: Any, fallback: Any) -> bool:
    """True when ``value`` has the container type ``fallback`` expects."""
    if isinstance(fallback, list):
        return isinstance(value, list)
    if isinstance(fallback, dict):
        return isinstance(value, dict)
    return True


class LocalCache:
    """
    Synchronous, client-scoped JSON key/value cache.

    Without platform storage (None or NullPlatformStorage) load() always
    returns the fallback and save() does nothing.
    """

    def __init__(self, storage: Optional[PlatformStorage] = None):
        self._storage = storage or NullPlatformStorage()

    @property
    def storage(self) -> PlatformStorage:
        return self._storage

    @property
    def enabled(self) -> bool:
        return self._storage.is_available

    def load(self, key: str, fallback: T) -> T:
        """
        Load and validate a value.

        Args:
            key: Storage key
            fallback: Returned when no valid value is stored

        Returns:
            The stored value, or ``fallback``
        """
        if not self.enabled or not key:
            return fallback

        try:
            raw = self._storage.get_item(key)
        except Exception as e:
            logger.error("local_cache_read_failed", key=key, error=str(e))
            return fallback

        if raw is None or raw in _EMPTY_SENTINELS:
            return fallback

        try:
            parsed = json.loads(raw)
        except ValueError as e:
            logger.error("local_cache_corrupt", key=key, error=str(e))
            self._purge(key)
            return fallback

        if parsed is None:
            return fallback

        if not shape_matches(parsed, fallback):
            logger.warning(
                "local_cache_shape_mismatch",
                key=key,
                expected=type(fallback).__name__,
                found=type(parsed).__name__,
            )
            self._purge(key)
            return fallback

        return parsed

    def save(self, key: str, value: Any) -> None:
        """
        Store a value; None removes the key.

        Never raises. A failed write leaves the previous value in place.
        """
        if not self.enabled or not key:
            return

        if value is None:
            self.remove(key)
            return

        try:
            serialized = json.dumps(value, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            logger.error("local_cache_serialize_failed", key=key, error=str(e))
            return

        try:
            self._storage.set_item(key, serialized)
        except Exception as e:
            logger.error("local_cache_write_failed", key=key, error=str(e))

    def remove(self, key: str) -> None:
        """Remove a key. Never raises."""
        if not self.enabled or not key:
            return
        try:
            self._storage.remove_item(key)
        except Exception as e:
            logger.error("local_cache_remove_failed", key=key, error=str(e))

    def _purge(self, key: str) -> None:
        try:
            self._storage.remove_item(key)
            logger.info("local_cache_purged", key=key)
        except Exception as e:
            logger.error("local_cache_purge_failed", key=key, error=str(e))
