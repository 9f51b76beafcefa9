"""
Domain store base.

A domain store is a typed view over one gateway key. It owns the default
value and turns raw JSON into models. Loading never fails: malformed items
are dropped with a warning and a wholly malformed value becomes the default.
"""

from abc import ABC, abstractmethod
from typing import Any, Generic, Optional, Type, TypeVar

import structlog
from pydantic import BaseModel, ValidationError

from memoir.services.storage.gateway import SyncGateway


T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)

logger = structlog.get_logger(__name__)


def validate_items(model: Type[M], raw: Any, key: str) -> list[M]:
    """
    Validate a stored list item by item.

    Items that fail validation are skipped and logged; a non-list yields [].
    """
    if not isinstance(raw, list):
        return []

    items: list[M] = []
    dropped = 0
    for entry in raw:
        try:
            items.append(model.model_validate(entry))
        except ValidationError:
            dropped += 1
    if dropped:
        logger.warning("invalid_items_dropped", key=key, dropped=dropped, kept=len(items))
    return items


class DomainStore(ABC, Generic[T]):
    """Typed accessor for one persisted key."""

    default_key: str = ""

    def __init__(self, gateway: SyncGateway, key: Optional[str] = None):
        self._gateway = gateway
        self.key = key or self.default_key

    @abstractmethod
    def default(self) -> T:
        """Fresh default value."""
        pass

    @abstractmethod
    def parse(self, raw: Any) -> T:
        """Turn stored JSON into the domain value. Must not raise."""
        pass

    @abstractmethod
    def dump(self, value: T) -> Any:
        """Turn the domain value into stored JSON."""
        pass

    async def load(self) -> T:
        raw = await self._gateway.load(self.key, self.dump(self.default()))
        return self.parse(raw)

    async def save(self, value: T) -> T:
        await self._gateway.save(self.key, self.dump(value))
        return value


class ModelListStore(DomainStore[list[M]]):
    """Store whose value is a list of one pydantic model."""

    model: Type[M]

    def default(self) -> list[M]:
        return []

    def parse(self, raw: Any) -> list[M]:
        return validate_items(self.model, raw, self.key)

    def dump(self, value: list[M]) -> list[dict]:
        return [item.to_json() for item in value]

    @staticmethod
    def _index_of(items: list[M], entry_id: str) -> Optional[int]:
        for idx, item in enumerate(items):
            if getattr(item, "id", None) == entry_id:
                return idx
        return None
