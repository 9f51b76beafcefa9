"""
Client Wiring for Memoir

Builds the client tier in one place and ties its lifetime to the caller:

    platform storage -> local cache -> storage API client -> sync gateway
                                                          -> availability probe
                                                          -> domain stores

Nothing is created implicitly on first use. ``create_journal()`` builds the
graph from settings; ``Journal`` starts and stops the probe and closes the
HTTP client.
"""

import logging
from typing import Optional

import httpx
import structlog

from memoir.config import Settings, get_settings
from memoir.log import configure_logging
from memoir.models.storage import ProbeSnapshot
from memoir.services.storage import (
    AvailabilityProbe,
    FilePlatformStorage,
    LocalCache,
    MemoryPlatformStorage,
    PlatformStorage,
    StorageAPIClient,
    SyncGateway,
)
from memoir.stores import (
    MemoryStore,
    MoodStore,
    PhotoStore,
    SongStore,
    TodoStore,
    VaultStore,
)


logger = structlog.get_logger(__name__)


class Journal:
    """
    The assembled client tier.

    Use as an async context manager, or call start() and aclose().
    """

    def __init__(
        self,
        gateway: SyncGateway,
        probe: AvailabilityProbe,
    ):
        self.gateway = gateway
        self.probe = probe

        self.memories = MemoryStore(gateway)
        self.moods = MoodStore(gateway)
        self.vault = VaultStore(gateway)
        self.todos = TodoStore(gateway)
        self.songs = SongStore(gateway)
        self.photos = PhotoStore(gateway, memories=self.memories)

    def status(self) -> ProbeSnapshot:
        return self.probe.snapshot()

    async def start(self) -> None:
        self.probe.start()
        logger.info("journal_started", remote_enabled=self.gateway.remote_enabled)

    async def aclose(self) -> None:
        await self.probe.stop()
        await self.gateway.aclose()
        logger.info("journal_stopped")

    async def __aenter__(self) -> "Journal":
        await self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()


def create_platform_storage(settings: Settings) -> PlatformStorage:
    """File-backed storage when a path is configured, memory otherwise."""
    storage_settings = settings.storage
    if storage_settings.local_cache_path:
        return FilePlatformStorage(
            storage_settings.local_cache_path,
            quota_bytes=storage_settings.local_quota_bytes,
        )
    return MemoryPlatformStorage(quota_bytes=storage_settings.local_quota_bytes)


def create_journal(
    settings: Optional[Settings] = None,
    platform_storage: Optional[PlatformStorage] = None,
    http_client: Optional[httpx.AsyncClient] = None,
    remote: bool = True,
) -> Journal:
    """
    Factory function to create the client tier.

    Args:
        settings: Settings to use (defaults to the cached environment settings)
        platform_storage: Local storage capability; built from settings if omitted
        http_client: Preconfigured client for the storage API
        remote: Set to False for a local-only journal

    Returns:
        An unstarted Journal
    """
    settings = settings or get_settings()
    app_settings = settings.app
    storage_settings = settings.storage
    configure_logging(
        json_logs=app_settings.log_json,
        level=logging.DEBUG if app_settings.debug_mode else logging.INFO,
    )

    local_cache = LocalCache(platform_storage or create_platform_storage(settings))

    api_client = None
    if remote:
        api_client = StorageAPIClient(
            base_url=storage_settings.api_base_url,
            timeout=storage_settings.request_timeout_seconds,
            http_client=http_client,
        )

    gateway = SyncGateway(local_cache, api_client)
    probe = AvailabilityProbe(
        gateway,
        interval_seconds=storage_settings.probe_interval_seconds,
    )
    return Journal(gateway, probe)
