"""Services package."""

from memoir.services.storage import (
    AvailabilityProbe,
    LocalCache,
    MockRemoteStore,
    RemoteStoreProvider,
    StorageAPIClient,
    StorageError,
    SyncGateway,
    UpstashRedisClient,
)

__all__ = [
    "AvailabilityProbe",
    "LocalCache",
    "MockRemoteStore",
    "RemoteStoreProvider",
    "StorageAPIClient",
    "StorageError",
    "SyncGateway",
    "UpstashRedisClient",
]
