"""
Favourites Manager for the player.
Keeps the set of liked track ids and persists it through a key/value store.
"""

import json
import logging
from typing import Callable, Iterable, List, Optional, Set

from shared.constants import LIKED_SONGS_KEY
from shared.kv_store import JsonFileStore
from shared.models import Track

logger = logging.getLogger(__name__)


class FavouritesManager:
    """
    Manages liked tracks, identified by track id.

    Membership does not depend on the catalog: an id stays liked while its
    track is filtered out or missing from the current catalog.
    """

    def __init__(self, store: Optional[JsonFileStore] = None, key: str = LIKED_SONGS_KEY):
        self._store = store if store is not None else JsonFileStore()
        self._key = key
        self._favourites: Set[str] = set()
        self._on_change_callbacks: List[Callable[[], None]] = []

        self.load()

    def add(self, track_id: str) -> None:
        """Add a track to favourites."""
        if track_id not in self._favourites:
            self._favourites.add(track_id)
            logger.debug(f"Added to favourites: {track_id}")
            self._save()
            self._notify_change()

    def remove(self, track_id: str) -> None:
        """Remove a track from favourites."""
        if track_id in self._favourites:
            self._favourites.remove(track_id)
            logger.debug(f"Removed from favourites: {track_id}")
            self._save()
            self._notify_change()

    def toggle(self, track_id: str) -> bool:
        """
        Toggle favourite status of a track.
        Returns True if now favourited, False if unfavourited.
        """
        if track_id in self._favourites:
            self.remove(track_id)
            return False
        self.add(track_id)
        return True

    def is_favourite(self, track_id: str) -> bool:
        """Check if a track is favourited."""
        return track_id in self._favourites

    def get_all(self) -> List[str]:
        """Get all favourite track ids, sorted."""
        return sorted(self._favourites)

    def size(self) -> int:
        return len(self._favourites)

    def favourite_tracks(self, tracks: Iterable[Track]) -> List[Track]:
        """Liked tracks in catalog order; liked ids with no loaded track are skipped."""
        return [track for track in tracks if track.id in self._favourites]

    def add_change_callback(self, callback: Callable[[], None]) -> None:
        """Register a callback to be called when favourites change."""
        if callback not in self._on_change_callbacks:
            self._on_change_callbacks.append(callback)

    def remove_change_callback(self, callback: Callable[[], None]) -> None:
        if callback in self._on_change_callbacks:
            self._on_change_callbacks.remove(callback)

    def _notify_change(self) -> None:
        for callback in self._on_change_callbacks:
            try:
                callback()
            except Exception as e:
                logger.error(f"Error in favourites change callback: {e}")

    def _save(self) -> None:
        self._store.set(self._key, json.dumps(sorted(self._favourites)))

    def load(self) -> None:
        """Read the persisted set; absent or malformed data starts an empty set."""
        raw = self._store.get(self._key)
        if raw is None:
            logger.debug("No stored favourites, starting fresh")
            self._favourites = set()
            return

        try:
            data = json.loads(raw)
        except (json.JSONDecodeError, TypeError) as e:
            logger.warning(f"Error decoding stored favourites: {e}, starting fresh")
            self._favourites = set()
            return

        if not isinstance(data, list):
            logger.warning("Invalid favourites format, starting fresh")
            self._favourites = set()
            return

        self._favourites = {item for item in data if isinstance(item, str)}
        logger.info(f"Loaded {len(self._favourites)} favourites")
