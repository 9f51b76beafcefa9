"""
Storage Services Package

Client tier: platform storage, local cache, storage API client, sync gateway
and availability probe.
Server tier: remote store implementations (Upstash REST, in-process mock)
and the provider that owns them.
"""

from memoir.services.storage.interface import (
    PlatformStorage,
    RemoteConnectionError,
    RemoteNotConfiguredError,
    RemoteStoreError,
    RemoteStoreInterface,
    StorageError,
    StorageQuotaExceededError,
)
from memoir.services.storage.platform import (
    FilePlatformStorage,
    MemoryPlatformStorage,
    NullPlatformStorage,
)
from memoir.services.storage.local_cache import LocalCache
from memoir.services.storage.upstash import UpstashRedisClient
from memoir.services.storage.mock_store import MockRemoteStore
from memoir.services.storage.provider import RemoteStoreProvider
from memoir.services.storage.api_client import StorageAPIClient
from memoir.services.storage.gateway import SyncGateway
from memoir.services.storage.probe import AvailabilityProbe

__all__ = [
    # Interfaces
    "PlatformStorage",
    "RemoteStoreInterface",
    # Exceptions
    "RemoteConnectionError",
    "RemoteNotConfiguredError",
    "RemoteStoreError",
    "StorageError",
    "StorageQuotaExceededError",
    # Client tier
    "AvailabilityProbe",
    "FilePlatformStorage",
    "LocalCache",
    "MemoryPlatformStorage",
    "NullPlatformStorage",
    "StorageAPIClient",
    "SyncGateway",
    # Server tier
    "MockRemoteStore",
    "RemoteStoreProvider",
    "UpstashRedisClient",
]
