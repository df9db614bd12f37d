"""
Media element backed by python-mpv.
Handles the low-level details of audio playback and relays mpv property
changes onto the player's event loop.
"""

import asyncio
import logging
import time
from pathlib import Path
from typing import Optional, Tuple

import mpv

from shared.exceptions import PlaybackRejected
from player.media import MediaElement

logger = logging.getLogger(__name__)

# Throttle for time updates (reduce CPU usage), ~4 updates per second
TIME_UPDATE_INTERVAL = 0.25

# Relative sources (the demo songs) resolve against the public directory
DEFAULT_MEDIA_ROOT = Path(__file__).resolve().parent.parent / "public"


class MpvMediaElement(MediaElement):
    """Wrapper around MPV implementing the media element contract."""

    def __init__(self, loop: asyncio.AbstractEventLoop, media_root: Path = DEFAULT_MEDIA_ROOT):
        super().__init__()
        self.loop = loop
        self.media_root = Path(media_root)
        # vo='null' because we are audio-only
        self.player = mpv.MPV(
            vo='null',
            ytdl=False,  # We provide direct URLs
            idle=True,
            keep_open='yes',  # stay on the last frame so eof-reached fires
        )
        self.player.pause = True
        self.player.volume = 100
        self.src: Optional[str] = None
        self._last_time_update = 0.0
        # (source_id, resolved path) of the last load, and the path mpv is playing
        self._binding: Optional[Tuple[str, str]] = None
        self._playing_path: Optional[str] = None

        self.player.observe_property('path', self._handle_path)
        self.player.observe_property('duration', self._handle_duration)
        self.player.observe_property('time-pos', self._handle_time_update)
        self.player.observe_property('eof-reached', self._handle_eof)

    def load(self, src: str, source_id: str) -> None:
        self.player.pause = True
        path = self._resolve(src)
        self.src = src
        self.source_id = source_id
        self._binding = (source_id, path)
        self._last_time_update = 0.0
        self.player.loadfile(path, 'replace')
        logger.debug(f"mpv loaded {source_id}: {src}")

    def _resolve(self, src: str) -> str:
        if "://" in src or Path(src).is_absolute():
            return src
        return str(self.media_root / src)

    async def play(self) -> None:
        if not self.src:
            raise PlaybackRejected("No source loaded")
        try:
            self.player.pause = False
        except Exception as e:
            raise PlaybackRejected("mpv refused to play", source=self.src, details=str(e)) from e

    def pause(self) -> None:
        self.player.pause = True

    def seek(self, position: float) -> None:
        if not self.src:
            return
        try:
            self.player.seek(position, reference='absolute')
        except Exception as e:
            logger.warning(f"Error seeking: {e}")

    def close(self) -> None:
        self.player.terminate()

    # mpv callbacks run on mpv's event thread; hand them to the loop.
    def _dispatch(self, callback, *args) -> None:
        if callback is not None and not self.loop.is_closed():
            self.loop.call_soon_threadsafe(callback, *args)

    def _bound_source(self) -> Optional[str]:
        """
        Source id the current mpv event belongs to.

        None until mpv reports the path of the last load, so properties still
        queued for the previous file are dropped here.
        """
        binding = self._binding
        if binding is None or self._playing_path != binding[1]:
            return None
        return binding[0]

    def _handle_path(self, name, value):
        self._playing_path = value

    def _handle_duration(self, name, value):
        source_id = self._bound_source()
        if value and source_id is not None:
            self._dispatch(self._on_metadata, source_id, float(value))

    def _handle_time_update(self, name, value):
        source_id = self._bound_source()
        if value is None or source_id is None:
            return
        now = time.monotonic()
        if now - self._last_time_update >= TIME_UPDATE_INTERVAL:
            self._last_time_update = now
            self._dispatch(self._on_time_update, source_id, float(value))

    def _handle_eof(self, name, value):
        source_id = self._bound_source()
        if value and source_id is not None:
            logger.debug(f"mpv eof-reached for {source_id}")
            self._dispatch(self._on_ended, source_id)
