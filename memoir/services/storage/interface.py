"""
Abstract Storage Interfaces

Two seams are defined here:

1. PlatformStorage - the synchronous, string-valued key/value capability the
   local cache sits on (the equivalent of a browser's localStorage).
2. RemoteStoreInterface - the async key/value database the server boundary
   forwards to (hosted Redis in production, an in-process dict in mock mode).

Values cross PlatformStorage as raw strings; the local cache owns JSON
encoding. Values cross RemoteStoreInterface as plain JSON values; the
implementation owns its wire encoding.
"""

from abc import ABC, abstractmethod
from typing import Any, Iterator, Optional


class PlatformStorage(ABC):
    """
    Synchronous key/value storage scoped to one client.

    Implementations may raise StorageError subclasses from writes;
    callers (the local cache) are expected to absorb them.
    """

    @property
    def is_available(self) -> bool:
        """False for contexts with no local storage at all."""
        return True

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """
        Read the raw stored string.

        Returns:
            The stored string, or None if the key is absent
        """
        pass

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """
        Store a raw string, replacing any previous value.

        Raises:
            StorageQuotaExceededError: If the write would exceed the quota
        """
        pass

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Remove a key. Removing an absent key is not an error."""
        pass

    @abstractmethod
    def keys(self) -> Iterator[str]:
        """Iterate over stored keys."""
        pass


class RemoteStoreInterface(ABC):
    """
    Async key/value database reached by the server boundary.

    Any implementation (Upstash REST, in-process mock) must implement these
    methods. Errors are raised, not swallowed: the HTTP layer turns them into
    error envelopes.
    """

    @abstractmethod
    async def get(self, key: str) -> Any:
        """
        Read a value.

        Returns:
            The stored JSON value, or None if absent

        Raises:
            RemoteStoreError: If the store cannot be read
        """
        pass

    @abstractmethod
    async def set(self, key: str, value: Any, ex: Optional[int] = None) -> bool:
        """
        Write a value.

        Args:
            key: Storage key
            value: JSON-serialisable value
            ex: Optional expiry in seconds

        Returns:
            True if the store acknowledged the write

        Raises:
            RemoteStoreError: If the write fails
        """
        pass

    @abstractmethod
    async def delete(self, key: str) -> int:
        """
        Delete a key.

        Returns:
            Number of keys removed (0 or 1)
        """
        pass

    async def aclose(self) -> None:
        """Release connections. No-op by default."""
        return None


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class StorageQuotaExceededError(StorageError):
    """Local platform storage is full."""
    pass


class RemoteStoreError(StorageError):
    """The remote store rejected a command or answered unexpectedly."""
    pass


class RemoteConnectionError(RemoteStoreError):
    """Could not reach the remote store."""
    pass


class RemoteNotConfiguredError(StorageError):
    """Remote URL or token is missing."""

    def __init__(self, missing: list[str]):
        self.missing = missing
        super().__init__(f"Missing environment variables: {', '.join(missing)}")
