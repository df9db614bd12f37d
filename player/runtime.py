"""
Player runtime.

Runs the playback controller on a dedicated asyncio loop thread. All player
state lives on that loop; other threads (the HTTP server) hand work over
with :meth:`PlayerRuntime.call` and wait for the result.
"""

import asyncio
import inspect
import logging
import threading
from typing import Any, Callable, Dict, List, Optional

from shared.constants import RUNTIME_CALL_TIMEOUT
from shared.kv_store import JsonFileStore
from shared.models import PlayerConfig
from player.controller import PlaybackController
from player.favourites_manager import FavouritesManager
from player.library import CatalogLoader
from player.media import DetachedMediaElement, MediaElement
from player.waveform import PhaseAnimator, WaveformModel, WaveformPath

logger = logging.getLogger(__name__)

MediaFactory = Callable[[asyncio.AbstractEventLoop], MediaElement]


def create_mpv_media(loop: asyncio.AbstractEventLoop) -> MediaElement:
    """mpv-backed media element, or a detached one when libmpv is unusable."""
    try:
        from player.engine import MpvMediaElement
        return MpvMediaElement(loop)
    except OSError as e:
        logger.warning(f"Could not initialise mpv ({e}); playback is disabled. "
                       "Make sure libmpv is installed: sudo apt install libmpv2")
        return DetachedMediaElement(f"libmpv unavailable: {e}")


class PlayerRuntime:
    """Owns the player loop thread and everything bound to it."""

    def __init__(self, config: Optional[PlayerConfig] = None,
                 store: Optional[JsonFileStore] = None,
                 media_factory: MediaFactory = create_mpv_media,
                 loader: Optional[CatalogLoader] = None):
        self.config = config
        self.store = store
        self.media_factory = media_factory
        self.loop = asyncio.new_event_loop()
        self.controller: Optional[PlaybackController] = None
        self.animator: Optional[PhaseAnimator] = None
        self._loader = loader
        self._catalog_task: Optional[asyncio.Task] = None
        self._state_listeners: List[Callable[[Dict[str, Any]], None]] = []
        self._thread = threading.Thread(target=self._run_loop, name="player-loop", daemon=True)

    def _run_loop(self) -> None:
        asyncio.set_event_loop(self.loop)
        self.loop.run_forever()

    def start(self) -> 'PlayerRuntime':
        self._thread.start()
        self.call(self._setup)
        return self

    async def _setup(self) -> None:
        media = self.media_factory(self.loop)
        loader = self._loader or CatalogLoader(self.config)
        favourites = FavouritesManager(self.store)
        self.controller = PlaybackController(media, loader, favourites)
        self.animator = PhaseAnimator()
        self.controller.add_change_callback(self._on_controller_change)
        # Catalog load is fire-and-forget; the demo set is shown meanwhile
        self._catalog_task = self.loop.create_task(self.controller.start())

    async def wait_for_catalog(self) -> None:
        if self._catalog_task is not None:
            await asyncio.shield(self._catalog_task)

    def call(self, fn: Callable[..., Any], *args, timeout: float = RUNTIME_CALL_TIMEOUT) -> Any:
        """Run ``fn(*args)`` on the player loop (awaiting it if it is a coroutine) and return the result."""
        async def invoke():
            result = fn(*args)
            if inspect.isawaitable(result):
                result = await result
            return result

        return asyncio.run_coroutine_threadsafe(invoke(), self.loop).result(timeout)

    def add_state_listener(self, callback: Callable[[Dict[str, Any]], None]) -> None:
        """Register a callback receiving a state snapshot after every change (called on the loop)."""
        if callback not in self._state_listeners:
            self._state_listeners.append(callback)

    def _on_controller_change(self) -> None:
        self.animator.sync(self.controller.session.is_playing)
        if not self._state_listeners:
            return
        snapshot = self.controller.snapshot()
        for callback in self._state_listeners:
            try:
                callback(snapshot)
            except Exception as e:
                logger.error(f"Error in state listener: {e}")

    def waveform(self, width: float, height: float) -> WaveformPath:
        session = self.controller.session
        return WaveformModel(width, height).build(session.progress, session.duration, self.animator.phase)

    def stop(self) -> None:
        if not self._thread.is_alive():
            return

        async def shutdown():
            if self._catalog_task is not None and not self._catalog_task.done():
                self._catalog_task.cancel()
            if self.animator is not None:
                self.animator.close()
            if self.controller is not None:
                self.controller.close()

        try:
            self.call(shutdown)
        finally:
            self.loop.call_soon_threadsafe(self.loop.stop)
            self._thread.join(timeout=5)
            if not self._thread.is_alive():
                self.loop.close()
