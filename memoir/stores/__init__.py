"""
Domain stores: typed views over the sync gateway, one persisted key each.
"""

from memoir.stores.base import DomainStore, ModelListStore
from memoir.stores.errors import (
    DomainValidationError,
    EntryNotFoundError,
    InsufficientFundsError,
    InvalidAmountError,
    PhotoTooLargeError,
)
from memoir.stores.memories import MemoryStore, timeline_order
from memoir.stores.moods import MoodStore
from memoir.stores.photos import GalleryImage, PhotoStore
from memoir.stores.songs import SongStore, default_songs
from memoir.stores.todos import TodoStore
from memoir.stores.vault import VaultStore

__all__ = [
    # Base
    "DomainStore",
    "ModelListStore",
    # Stores
    "MemoryStore",
    "MoodStore",
    "PhotoStore",
    "SongStore",
    "TodoStore",
    "VaultStore",
    # Helpers
    "GalleryImage",
    "default_songs",
    "timeline_order",
    # Exceptions
    "DomainValidationError",
    "EntryNotFoundError",
    "InsufficientFundsError",
    "InvalidAmountError",
    "PhotoTooLargeError",
]
