"""
Test doubles for the media element and the key/value store.
"""
from typing import Dict, List, Optional, Tuple

from shared.exceptions import PlaybackRejected
from shared.models import Catalog, fallback_tracks
from player.controller import PlaybackController
from player.favourites_manager import FavouritesManager
from player.library import CatalogLoader
from player.media import MediaElement


class MemoryStore:
    def __init__(self, values: Optional[Dict[str, str]] = None):
        self.values = dict(values or {})
        self.writes = 0

    def get(self, key):
        return self.values.get(key)

    def set(self, key, value):
        self.values[key] = value
        self.writes += 1


class FakeMediaElement(MediaElement):
    """Records every command; play() can be told to reject."""

    def __init__(self, reject: bool = False):
        super().__init__()
        self.reject = reject
        self.calls: List[Tuple[str, object]] = []
        self.src: Optional[str] = None
        self.position = 0.0
        self.playing = False
        self.closed = False

    def load(self, src, source_id):
        self.calls.append(('load', source_id))
        self.src = src
        self.source_id = source_id
        self.position = 0.0
        self.playing = False

    async def play(self):
        self.calls.append(('play', self.source_id))
        if self.reject:
            raise PlaybackRejected("play() blocked", source=self.src)
        self.playing = True

    def pause(self):
        self.calls.append(('pause', self.source_id))
        self.playing = False

    def seek(self, position):
        self.calls.append(('seek', position))
        self.position = position

    def close(self):
        self.closed = True

    def commands(self, name):
        return [arg for call, arg in self.calls if call == name]

    def emit_metadata(self, duration, source_id=None):
        self._on_metadata(source_id or self.source_id, duration)

    def emit_time(self, position, source_id=None):
        self._on_time_update(source_id or self.source_id, position)

    def emit_ended(self, source_id=None):
        self._on_ended(source_id or self.source_id)


def make_controller(media: Optional[FakeMediaElement] = None,
                    store: Optional[MemoryStore] = None) -> PlaybackController:
    """Controller over a loaded demo catalog."""
    loader = CatalogLoader()
    loader.catalog = Catalog(tracks=fallback_tracks(), loading=False)
    favourites = FavouritesManager(store if store is not None else MemoryStore())
    return PlaybackController(media or FakeMediaElement(), loader, favourites)
