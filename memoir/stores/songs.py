"""Playlist store. An empty playlist falls back to the starter songs."""

from typing import Any

from memoir.models.journal import Song
from memoir.models.storage import SONGS_KEY
from memoir.stores.base import ModelListStore
from memoir.stores.errors import DomainValidationError


def default_songs() -> list[Song]:
    return [
        Song(id="1", title="Our Song", artist="Memory Lane", url="/placeholder-audio.mp3", duration=180),
        Song(id="2", title="Together Forever", artist="Love Notes", url="/placeholder-audio.mp3", duration=210),
        Song(id="3", title="Sweet Dreams", artist="Gentle Waves", url="/placeholder-audio.mp3", duration=195),
    ]


class SongStore(ModelListStore[Song]):

    default_key = SONGS_KEY
    model = Song

    def default(self) -> list[Song]:
        return default_songs()

    def parse(self, raw: Any) -> list[Song]:
        return super().parse(raw) or default_songs()

    async def add(self, title: str, url: str, artist: str = "", duration: float = 0) -> Song:
        if not url.strip().startswith(("http://", "https://", "/", "data:audio/")):
            raise DomainValidationError(f"Not a playable audio URL: {url!r}")
        song = Song(title=title, artist=artist, url=url, duration=duration)
        songs = await self.load()
        songs.append(song)
        await self.save(songs)
        return song

    async def remove(self, song_id: str) -> bool:
        songs = await self.load()
        remaining = [s for s in songs if s.id != song_id]
        if len(remaining) == len(songs):
            return False
        await self.save(remaining)
        return True
