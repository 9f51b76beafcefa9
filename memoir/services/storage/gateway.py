"""
Sync Gateway

The single persistence entry point for domain stores. Hides the two tiers:

    load(key, fallback)
        1. Ask the storage API. Usable data is written into the local
           cache and returned immediately.
        2. Otherwise answer from the local cache.

    save(key, value)
        1. Write the local cache (always, first).
        2. Push to the storage API; a failure is logged and dropped.

Neither call raises. Without an API client the gateway is local-only.

Known ambiguity: step 2 of load() runs whenever the remote answer equals
the fallback, so a remote value that happens to equal the fallback is
treated like "remote had nothing". The local cache was just warmed with the
same value, so the result is unchanged.

Overlapping saves to one key are not serialised. Locally the last call wins;
remotely the last response to arrive wins.
"""

from typing import Any, Optional, TypeVar

import structlog

from memoir.services.storage.api_client import StorageAPIClient
from memoir.services.storage.local_cache import LocalCache, shape_matches


T = TypeVar("T")

logger = structlog.get_logger(__name__)


class SyncGateway:
    """
    Two-tier read/write orchestrator.

    Owns the injected API client: aclose() closes it.
    """

    def __init__(
        self,
        local_cache: LocalCache,
        api_client: Optional[StorageAPIClient] = None,
    ):
        self._local = local_cache
        self._api = api_client

    @property
    def local_cache(self) -> LocalCache:
        return self._local

    @property
    def remote_enabled(self) -> bool:
        return self._api is not None

    async def _load_remote(self, key: str, fallback: T) -> T:
        if self._api is None or not key:
            return fallback

        try:
            envelope = await self._api.fetch(key)
        except Exception as e:
            logger.error("remote_load_failed", key=key, error=str(e))
            return fallback

        if envelope is None:
            return fallback

        if not envelope.success or envelope.data is None:
            logger.warning("remote_load_empty", key=key)
            return fallback

        if not shape_matches(envelope.data, fallback):
            logger.warning(
                "remote_load_shape_mismatch",
                key=key,
                expected=type(fallback).__name__,
                found=type(envelope.data).__name__,
            )
            return fallback

        self._local.save(key, envelope.data)
        return envelope.data

    async def load(self, key: str, fallback: T) -> T:
        """
        Load a value, preferring the remote tier.

        Args:
            key: Storage key
            fallback: Returned when neither tier has valid data

        Returns:
            Remote value, else local value, else ``fallback``
        """
        remote_value = await self._load_remote(key, fallback)
        if remote_value != fallback:
            return remote_value

        return self._local.load(key, fallback)

    async def save(self, key: str, value: Any) -> None:
        """
        Save a value locally, then remotely (best effort).

        None removes the key locally; the remote tier receives ``data: null``.
        """
        self._local.save(key, value)

        if self._api is None or not key:
            return

        try:
            pushed = await self._api.push(key, value)
        except Exception as e:
            logger.error("remote_save_failed", key=key, error=str(e))
            return

        if not pushed:
            logger.warning("remote_save_skipped", key=key, detail="data only stored locally")

    def load_local(self, key: str, fallback: T) -> T:
        """Synchronous, local-only load."""
        return self._local.load(key, fallback)

    def save_local(self, key: str, value: Any) -> None:
        """Synchronous, local-only save."""
        self._local.save(key, value)

    async def is_available(self) -> bool:
        """
        Probe the remote tier.

        Informational only; load() and save() never consult it.
        """
        if self._api is None:
            return False
        try:
            return await self._api.health_check()
        except Exception as e:
            logger.error("health_check_failed", error=str(e))
            return False

    async def aclose(self) -> None:
        if self._api is not None:
            await self._api.aclose()

    async def __aenter__(self) -> "SyncGateway":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
