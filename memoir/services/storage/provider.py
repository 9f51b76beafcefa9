"""
Remote store provider.

Owns the single remote connection of a server process. The client is built
lazily on first use and reused afterwards; the provider itself is created at
app startup and closed at shutdown.

Missing configuration is not an error. get() returns None (the null
capability) in "redis" mode, or a seeded MockRemoteStore in "mock" mode.
"""

from typing import Optional

import structlog

from memoir.config import RemoteStoreSettings, StorageSettings
from memoir.services.storage.interface import RemoteStoreInterface
from memoir.services.storage.mock_store import MockRemoteStore
from memoir.services.storage.upstash import UpstashRedisClient


logger = structlog.get_logger(__name__)


class RemoteStoreProvider:
    """Lazily constructed, memoised remote store."""

    def __init__(
        self,
        remote_settings: RemoteStoreSettings,
        storage_settings: StorageSettings,
        store: Optional[RemoteStoreInterface] = None,
    ):
        self._remote_settings = remote_settings
        self._storage_settings = storage_settings
        self._store = store
        self._resolved = store is not None

    @property
    def mode(self) -> str:
        return self._storage_settings.storage_mode

    @property
    def remote_settings(self) -> RemoteStoreSettings:
        return self._remote_settings

    @property
    def storage_settings(self) -> StorageSettings:
        return self._storage_settings

    def get(self) -> Optional[RemoteStoreInterface]:
        """Return the remote store, building it on first call."""
        if self._resolved:
            return self._store

        if self._remote_settings.is_configured:
            self._store = UpstashRedisClient.from_settings(
                self._remote_settings,
                timeout=self._storage_settings.request_timeout_seconds,
                retry_attempts=self._storage_settings.remote_retry_attempts,
            )
            logger.info("remote_store_ready", backend="upstash")
        elif self.mode == "mock":
            self._store = MockRemoteStore()
            logger.warning(
                "remote_store_mocked",
                missing=self._remote_settings.missing_variables,
            )
        else:
            logger.error(
                "remote_store_not_configured",
                missing=self._remote_settings.missing_variables,
            )
            self._store = None

        self._resolved = True
        return self._store

    async def aclose(self) -> None:
        if self._store is not None:
            await self._store.aclose()
        self._store = None
        self._resolved = False
