"""Mood calendar store: ISO day -> each user's mood."""

from typing import Any, Optional

import structlog
from pydantic import ValidationError

from memoir.models.journal import DualMood, Identity, MoodKey, parse_iso_day
from memoir.models.storage import MOODS_KEY
from memoir.stores.base import DomainStore
from memoir.stores.errors import DomainValidationError


logger = structlog.get_logger(__name__)

MoodMap = dict[str, DualMood]


class MoodStore(DomainStore[MoodMap]):

    default_key = MOODS_KEY

    def default(self) -> MoodMap:
        return {}

    def parse(self, raw: Any) -> MoodMap:
        if not isinstance(raw, dict):
            return {}
        moods: MoodMap = {}
        for day, value in raw.items():
            try:
                moods[day] = DualMood.model_validate(value)
            except ValidationError:
                logger.warning("invalid_mood_dropped", key=self.key, day=day)
        return moods

    def dump(self, value: MoodMap) -> dict[str, dict]:
        return {day: mood.to_json() for day, mood in value.items() if not mood.is_empty}

    @staticmethod
    def _check_day(day: str) -> str:
        if parse_iso_day(day) is None:
            raise DomainValidationError(f"Not an ISO date: {day!r}")
        return day[:10]

    async def mood_for(self, day: str) -> Optional[DualMood]:
        return (await self.load()).get(self._check_day(day))

    async def set_mood(self, day: str, identity: Identity, mood: MoodKey) -> DualMood:
        """Record one user's mood, keeping the other user's mood for that day."""
        day = self._check_day(day)
        moods = await self.load()
        current = moods.get(day, DualMood())
        updated = current.model_copy(update={Identity(identity).value: MoodKey(mood).value})
        moods[day] = updated
        await self.save(moods)
        return updated

    async def clear_mood(self, day: str, identity: Identity) -> None:
        """Remove one user's mood; the day disappears once both are empty."""
        day = self._check_day(day)
        moods = await self.load()
        if day not in moods:
            return
        moods[day] = moods[day].model_copy(update={Identity(identity).value: None})
        if moods[day].is_empty:
            del moods[day]
        await self.save(moods)
