"""
Data Models Package

Pydantic models for journal values, storage API envelopes and
availability status.
"""

from memoir.models.journal import (
    MAX_VAULT_TRANSACTIONS,
    Comment,
    Currency,
    DualMood,
    Identity,
    MemoryEntry,
    MoodKey,
    Song,
    TodoItem,
    TodoPriority,
    TransactionType,
    VaultBalance,
    VaultData,
    VaultTransaction,
    generate_id,
)
from memoir.models.storage import (
    KNOWN_KEYS,
    MEMORIES_KEY,
    MOODS_KEY,
    PHOTOS_KEY,
    SONGS_KEY,
    TODOS_KEY,
    VAULT_KEY,
    ProbeSnapshot,
    StorageErrorResponse,
    StorageReadResponse,
    StorageStatus,
    StorageWriteRequest,
    StorageWriteResponse,
)

__all__ = [
    # Journal models
    "MAX_VAULT_TRANSACTIONS",
    "Comment",
    "Currency",
    "DualMood",
    "Identity",
    "MemoryEntry",
    "MoodKey",
    "Song",
    "TodoItem",
    "TodoPriority",
    "TransactionType",
    "VaultBalance",
    "VaultData",
    "VaultTransaction",
    "generate_id",
    # Storage models
    "KNOWN_KEYS",
    "MEMORIES_KEY",
    "MOODS_KEY",
    "PHOTOS_KEY",
    "SONGS_KEY",
    "TODOS_KEY",
    "VAULT_KEY",
    "ProbeSnapshot",
    "StorageErrorResponse",
    "StorageReadResponse",
    "StorageStatus",
    "StorageWriteRequest",
    "StorageWriteResponse",
]
