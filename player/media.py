"""
Media element contract.

A media element plays one source at a time and reports three lifecycle
events back to its owner. Every event carries the ``source_id`` that was
passed to :meth:`MediaElement.load`, so listeners can drop events that
belong to a source they have since replaced.
"""

from abc import ABC, abstractmethod
from typing import Callable, Optional

from shared.exceptions import PlaybackRejected

MetadataCallback = Callable[[str, float], None]
TimeUpdateCallback = Callable[[str, float], None]
EndedCallback = Callable[[str], None]


class MediaElement(ABC):
    """Capability interface over an audio backend."""

    def __init__(self):
        self.source_id: Optional[str] = None
        self._on_metadata: Optional[MetadataCallback] = None
        self._on_time_update: Optional[TimeUpdateCallback] = None
        self._on_ended: Optional[EndedCallback] = None

    @abstractmethod
    def load(self, src: str, source_id: str) -> None:
        """Replace the current source; the element is left paused at position 0."""

    @abstractmethod
    async def play(self) -> None:
        """
        Start or resume playback.

        Raises:
            PlaybackRejected: the backend refused to play (nothing loaded,
                              no output device, ...)
        """

    @abstractmethod
    def pause(self) -> None:
        """Pause playback."""

    @abstractmethod
    def seek(self, position: float) -> None:
        """Set the absolute position in seconds."""

    def close(self) -> None:
        """Release backend resources."""

    # Callback setters
    def set_metadata_callback(self, callback: MetadataCallback) -> None:
        self._on_metadata = callback

    def set_time_update_callback(self, callback: TimeUpdateCallback) -> None:
        self._on_time_update = callback

    def set_ended_callback(self, callback: EndedCallback) -> None:
        self._on_ended = callback


class DetachedMediaElement(MediaElement):
    """
    Media element used when no audio backend could be initialised.

    Sources are bound and positions tracked, but every play request is
    rejected so the session never claims to be playing.
    """

    def __init__(self, reason: str = "No audio output available"):
        super().__init__()
        self.reason = reason
        self.src: Optional[str] = None
        self.position = 0.0

    def load(self, src: str, source_id: str) -> None:
        self.src = src
        self.source_id = source_id
        self.position = 0.0

    async def play(self) -> None:
        raise PlaybackRejected(self.reason, source=self.src)

    def pause(self) -> None:
        pass

    def seek(self, position: float) -> None:
        self.position = position
