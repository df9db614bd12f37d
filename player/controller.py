"""
Playback controller.

Reconciles the catalog, the media element's event stream and user intent
into one playback session. All methods run on the player's event loop;
nothing here is thread-safe by itself.
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from shared import playback_state
from shared.exceptions import PlaybackRejected
from shared.models import Catalog, Track
from shared.playback_state import PlaybackSession
from player.favourites_manager import FavouritesManager
from player.library import CatalogLoader
from player.media import MediaElement
from player.search import filter_tracks

logger = logging.getLogger(__name__)

SKIP_STEPS = {'next': 1, 'prev': -1}


class PlaybackController:
    """Owns the playback session and drives the bound media element."""

    def __init__(self, media: MediaElement, loader: CatalogLoader,
                 favourites: FavouritesManager):
        self.media = media
        self.loader = loader
        self.favourites = favourites
        self.session = PlaybackSession()
        self.query = ""
        self._on_change_callbacks: List[Callable[[], None]] = []

        self.media.set_metadata_callback(self.on_metadata)
        self.media.set_time_update_callback(self.on_time_tick)
        self.media.set_ended_callback(self.on_ended)
        self.favourites.add_change_callback(self._notify_change)

    @property
    def catalog(self) -> Catalog:
        return self.loader.catalog

    @property
    def current_track(self) -> Optional[Track]:
        if self.session.track_id is None:
            return None
        return self.catalog.get_track_by_id(self.session.track_id)

    # Catalog

    async def start(self) -> None:
        """Bind the default track, then load the real catalog."""
        if self.session.track_id is None and self.catalog.tracks:
            await self.select(self.catalog.tracks[0], autoplay=False)
        await self.refresh_catalog()

    async def refresh_catalog(self) -> Catalog:
        catalog = await self.loader.load_catalog()
        await self.apply_catalog(catalog)
        return catalog

    async def apply_catalog(self, catalog: Catalog) -> None:
        """Keep the current selection if the new catalog has it, else select the first track."""
        kept = self.current_track
        if kept is None:
            if catalog.tracks:
                await self.select(catalog.tracks[0], autoplay=False)
            else:
                self._notify_change()
            return

        if self.session.duration_known and not kept.duration:
            kept.duration = self.session.duration
        logger.debug(f"Catalog refreshed, keeping selection {kept.id}")
        self._notify_change()

    # Transport

    async def select(self, track: Track, autoplay: bool = True) -> None:
        """
        Make ``track`` the current track.

        A different track stops playback, rebinds the media element and
        resets progress before any play request for the new source is made.
        Re-selecting the current track only resumes it when autoplay is asked.
        """
        if track.id == self.session.track_id:
            if autoplay and not self.session.is_playing:
                await self.play()
            return

        self.media.pause()
        self.session = playback_state.change_track(self.session, track, autoplay)
        self.media.load(track.src, track.id)
        intent, self.session = playback_state.consume_autoplay(self.session)
        logger.info(f"Selected {track.id} ({track.artist} - {track.title})")
        self._notify_change()

        if intent:
            await self.play()

    async def select_by_id(self, track_id: str, autoplay: bool = True) -> Optional[Track]:
        track = self.catalog.get_track_by_id(track_id)
        if track is None:
            return None
        await self.select(track, autoplay=autoplay)
        return track

    async def play(self) -> bool:
        """
        Ask the media element to play.

        The session only reports playing once the element has accepted the
        request; a rejection leaves it paused until the next user action.
        """
        track_id = self.session.track_id
        if track_id is None:
            return False

        if self.session.duration_known and self.session.progress >= self.session.duration:
            # Replay a finished track from the start
            self.media.seek(0)
            self.session = playback_state.sought(self.session, 0)

        try:
            await self.media.play()
        except PlaybackRejected as e:
            logger.warning(f"Play request for {track_id} rejected: {e}")
            if self.session.track_id == track_id:
                self.session = playback_state.paused(self.session)
                self._notify_change()
            return False

        if self.session.track_id != track_id:
            # Another track was selected while the request was pending
            return False
        self.session = playback_state.play_confirmed(self.session)
        self._notify_change()
        return True

    def pause(self) -> None:
        self.media.pause()
        self.session = playback_state.paused(self.session)
        self._notify_change()

    async def toggle(self) -> bool:
        """Play if paused, pause if playing. Returns the resulting playing state."""
        if self.session.is_playing:
            self.pause()
            return False
        return await self.play()

    def seek(self, position: float) -> float:
        """Seek to ``position`` seconds, clamped to the track; progress updates immediately."""
        position = playback_state.clamp_position(self.session, position)
        self.media.seek(position)
        self.session = playback_state.sought(self.session, position)
        self._notify_change()
        return position

    async def skip(self, direction: str) -> Optional[Track]:
        """
        Move to the neighbouring track in the list the user is looking at.

        The search results are walked when a search matches anything,
        the whole catalog otherwise; both ends wrap around.
        """
        if direction not in SKIP_STEPS:
            raise ValueError(f"Unknown skip direction: {direction}")

        candidates = self.filtered_view() or list(self.catalog.tracks)
        if not candidates:
            return None

        ids = [track.id for track in candidates]
        if self.session.track_id in ids:
            n = len(candidates)
            target = candidates[(ids.index(self.session.track_id) + SKIP_STEPS[direction] + n) % n]
        else:
            target = candidates[0]

        await self.select(target, autoplay=True)
        return target

    # Media element events

    def _is_stale(self, source_id: str, event: str) -> bool:
        if source_id != self.session.track_id:
            logger.debug(f"Ignoring {event} for {source_id}; current source is {self.session.track_id}")
            return True
        return False

    def on_metadata(self, source_id: str, duration: float) -> None:
        if self._is_stale(source_id, "metadata"):
            return
        self.session = playback_state.metadata_resolved(self.session, duration)
        track = self.current_track
        if track is not None and self.session.duration_known:
            track.duration = self.session.duration
        self._notify_change()

    def on_time_tick(self, source_id: str, position: float) -> None:
        if self._is_stale(source_id, "time update"):
            return
        self.session = playback_state.time_ticked(self.session, position)
        self._notify_change()

    def on_ended(self, source_id: str) -> None:
        if self._is_stale(source_id, "ended"):
            return
        self.session = playback_state.ended(self.session)
        logger.info(f"Finished {source_id}")
        self._notify_change()

    # Search and favourites

    def set_query(self, query: str) -> List[Track]:
        self.query = query or ""
        self._notify_change()
        return self.filtered_view()

    def filtered_view(self) -> List[Track]:
        return filter_tracks(self.catalog.tracks, self.query)

    def toggle_favourite(self, track_id: str) -> bool:
        return self.favourites.toggle(track_id)

    def favourite_tracks(self) -> List[Track]:
        return self.favourites.favourite_tracks(self.catalog.tracks)

    # Observers

    def add_change_callback(self, callback: Callable[[], None]) -> None:
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
                logger.error(f"Error in player change callback: {e}")

    def snapshot(self) -> Dict[str, Any]:
        """Serializable view of the whole player state."""
        current = self.current_track
        return {
            "loading": self.catalog.loading,
            "session": self.session.to_dict(),
            "current_track": current.to_dict() if current else None,
            "query": self.query,
            "filtered_ids": [track.id for track in self.filtered_view()],
            "favourite_ids": [track.id for track in self.favourite_tracks()],
        }

    def close(self) -> None:
        self.media.pause()
        self.media.close()
