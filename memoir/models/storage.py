"""
Storage Models

Wire envelopes of the /storage API and the availability status exposed to
status indicators. The envelope field names are shared with the client side
of the boundary, so both tiers import them from here.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


# Persisted keys. Domain stores own the schema behind each one.
MEMORIES_KEY = "memoir_memories"
MOODS_KEY = "memoir_moods"
VAULT_KEY = "memoir_vault"
TODOS_KEY = "memoir_todos"
SONGS_KEY = "memoir_songs"
PHOTOS_KEY = "memoir_photos"

KNOWN_KEYS = (
    MEMORIES_KEY,
    MOODS_KEY,
    VAULT_KEY,
    TODOS_KEY,
    SONGS_KEY,
    PHOTOS_KEY,
)


def utc_timestamp() -> str:
    """ISO-8601 UTC timestamp used in every envelope."""
    return datetime.now(timezone.utc).isoformat()


# =============================================================================
# API ENVELOPES
# =============================================================================

class StorageWriteRequest(BaseModel):
    """Body of POST /storage/{key}."""
    data: Any = None


class StorageReadResponse(BaseModel):
    """Successful GET /storage/{key}."""
    success: bool = True
    data: Any = None
    timestamp: str = Field(default_factory=utc_timestamp)


class StorageWriteResponse(BaseModel):
    """Successful POST, DELETE or health check."""
    success: bool = True
    message: str
    timestamp: str = Field(default_factory=utc_timestamp)


class StorageErrorResponse(BaseModel):
    """Any failed storage call. Always sent with a non-2xx status."""
    error: str
    details: Any = None


# =============================================================================
# AVAILABILITY
# =============================================================================

class StorageStatus(str, Enum):
    """What the status badge shows."""
    CHECKING = "checking"        # No probe has completed yet
    AVAILABLE = "available"      # Remote reachable and host online
    UNAVAILABLE = "unavailable"  # Probe failed or host offline ("local only")


class ProbeSnapshot(BaseModel):
    """Point-in-time view of the availability probe."""
    model_config = ConfigDict(frozen=True)

    status: StorageStatus
    server_available: Optional[bool] = None
    online: bool = True
    checked_at: Optional[datetime] = None
