"""
Journal Data Models

Schemas for the values the domain stores persist. The JSON field names are
part of the stored contract (camelCase, e.g. ``createdAt``), so every model
serialises by alias and accepts either spelling on input.

Validation is lenient where stored data may predate a field: optional fields
default rather than fail.
"""

import time
from datetime import date, datetime, timezone
from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator


def generate_id() -> str:
    """Create a random identifier for a new journal entry."""
    return str(uuid4())


def now_millis() -> int:
    """Current time as epoch milliseconds."""
    return int(time.time() * 1000)


def now_iso() -> str:
    """Current UTC time as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()


def parse_iso_day(value: str) -> Optional[date]:
    """Parse the yyyy-mm-dd prefix of ``value``; None if it is not a date."""
    try:
        return date.fromisoformat(value[:10])
    except (TypeError, ValueError):
        return None


# =============================================================================
# ENUMS
# =============================================================================

class Identity(str, Enum):
    """The two journal users."""
    DADDY = "daddy"
    PUPPY = "puppy"


class MoodKey(str, Enum):
    """Mood scale, best to worst."""
    GREAT = "great"
    GOOD = "good"
    OK = "ok"
    DOWN = "down"
    BAD = "bad"


class Currency(str, Enum):
    """Currencies held in the vault."""
    CNY = "CNY"
    IDR = "IDR"


class TransactionType(str, Enum):
    DEPOSIT = "deposit"
    WITHDRAW = "withdraw"


class TodoPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class JournalModel(BaseModel):
    """Base for stored journal values."""
    model_config = ConfigDict(
        populate_by_name=True,
        str_strip_whitespace=True,
        use_enum_values=True,
    )

    def to_json(self) -> dict:
        """Dump to the stored JSON shape."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# =============================================================================
# MEMORIES
# =============================================================================

class Comment(JournalModel):
    """A comment left on a memory entry."""

    id: str = Field(default_factory=generate_id)
    identity: Identity
    text: str = Field(..., min_length=1)
    created_at: int = Field(default_factory=now_millis, alias="createdAt")


class MemoryEntry(JournalModel):
    """
    One timeline entry.

    ``date`` is the day the memory belongs to (ISO yyyy-mm-dd);
    ``created_at`` is when it was written (epoch ms).
    """

    id: str = Field(default_factory=generate_id)
    date: str = Field(..., min_length=1)
    title: str = ""
    text: str = ""
    images: list[str] = Field(default_factory=list)
    created_at: int = Field(default_factory=now_millis, alias="createdAt")
    pinned: bool = False
    identity: Optional[Identity] = None
    comments: list[Comment] = Field(default_factory=list)

    @field_validator("images", mode="before")
    @classmethod
    def drop_blank_images(cls, v):
        if not isinstance(v, list):
            return []
        return [img for img in v if isinstance(img, str) and img.strip()]

    @property
    def day(self):
        """Parsed ``date``, or None when it is not a valid ISO date."""
        return parse_iso_day(self.date)


# =============================================================================
# MOODS
# =============================================================================

class DualMood(JournalModel):
    """Moods recorded by each user for one day."""

    daddy: Optional[MoodKey] = None
    puppy: Optional[MoodKey] = None

    @property
    def is_empty(self) -> bool:
        return self.daddy is None and self.puppy is None


# =============================================================================
# VAULT
# =============================================================================

MAX_VAULT_TRANSACTIONS = 10


class VaultBalance(JournalModel):
    CNY: float = 0.0
    IDR: float = 0.0

    @field_validator("CNY", "IDR", mode="before")
    @classmethod
    def missing_is_zero(cls, v):
        return v or 0.0


class VaultTransaction(JournalModel):
    """A single deposit or withdrawal."""

    id: str = Field(default_factory=generate_id)
    amount: float = Field(..., gt=0)
    type: TransactionType
    currency: Currency
    description: str = ""
    timestamp: str = Field(default_factory=now_iso)


class VaultData(JournalModel):
    """Balances plus the most recent transactions, newest first."""

    balance: VaultBalance = Field(default_factory=VaultBalance)
    transactions: list[VaultTransaction] = Field(default_factory=list)

    @field_validator("balance", mode="before")
    @classmethod
    def balance_must_be_object(cls, v):
        return v if isinstance(v, (dict, VaultBalance)) else {}

    @field_validator("transactions", mode="before")
    @classmethod
    def transactions_must_be_list(cls, v):
        return v if isinstance(v, list) else []


# =============================================================================
# TODOS
# =============================================================================

class TodoItem(JournalModel):
    """A shared to-do."""

    id: str = Field(default_factory=generate_id)
    title: str = Field(..., min_length=1)
    description: str = ""
    completed: bool = False
    priority: TodoPriority = TodoPriority.MEDIUM
    due_date: Optional[str] = Field(default=None, alias="dueDate")
    created_at: str = Field(default_factory=now_iso, alias="createdAt")


# =============================================================================
# SONGS
# =============================================================================

class Song(JournalModel):
    """A playlist entry."""

    id: str = Field(default_factory=generate_id)
    title: str = Field(..., min_length=1)
    artist: str = ""
    url: str = Field(..., min_length=1)
    duration: float = Field(default=0, ge=0)
