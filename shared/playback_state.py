"""
Playback session state and its transitions.

Every transition is a plain function taking the current session (plus an
event payload) and returning the next session, so the state machine can be
exercised without any media backend.
"""
import dataclasses
import math
from dataclasses import dataclass
from typing import Any, Optional, Tuple

from shared.models import Track


@dataclass(frozen=True)
class PlaybackSession:
    """
    The single mutable playback session (immutable snapshots).

    Attributes:
        track_id: Selected track, None before anything is bound
        is_playing: Mirrors the confirmed state of the media element
        progress: Seconds into the current track
        duration: Authoritative once known, 0 otherwise
        autoplay_intent: One-shot "play as soon as the new source is bound"
    """
    track_id: Optional[str] = None
    is_playing: bool = False
    progress: float = 0.0
    duration: float = 0.0
    autoplay_intent: bool = False

    @property
    def duration_known(self) -> bool:
        return self.duration > 0

    @property
    def ratio(self) -> float:
        """Progress as a fraction of duration, guarded against unknown duration."""
        return min(max(self.progress / max(self.duration, 1), 0.0), 1.0)

    def to_dict(self) -> dict[str, Any]:
        return {
            "track_id": self.track_id,
            "is_playing": self.is_playing,
            "progress": self.progress,
            "duration": self.duration,
            "ratio": self.ratio,
        }


def change_track(session: PlaybackSession, track: Track, autoplay: bool) -> PlaybackSession:
    """Bind a different track: stopped, progress reset, duration from the track."""
    return PlaybackSession(
        track_id=track.id,
        is_playing=False,
        progress=0.0,
        duration=float(track.duration or 0),
        autoplay_intent=autoplay,
    )


def consume_autoplay(session: PlaybackSession) -> Tuple[bool, PlaybackSession]:
    """Read and clear the one-shot autoplay intent in a single step."""
    return session.autoplay_intent, dataclasses.replace(session, autoplay_intent=False)


def play_confirmed(session: PlaybackSession) -> PlaybackSession:
    return dataclasses.replace(session, is_playing=True)


def paused(session: PlaybackSession) -> PlaybackSession:
    return dataclasses.replace(session, is_playing=False)


def clamp_position(session: PlaybackSession, position: float) -> float:
    """Clamp a seek target to [0, duration]; only the lower bound while duration is unknown."""
    if position is None or not math.isfinite(position):
        position = 0.0
    position = max(0.0, float(position))
    if session.duration_known:
        position = min(position, session.duration)
    return position


def sought(session: PlaybackSession, position: float) -> PlaybackSession:
    return dataclasses.replace(session, progress=clamp_position(session, position))


def metadata_resolved(session: PlaybackSession, duration: float) -> PlaybackSession:
    if duration is None or not math.isfinite(duration) or duration <= 0:
        return session
    return dataclasses.replace(
        session,
        duration=float(duration),
        progress=min(session.progress, float(duration)),
    )


def time_ticked(session: PlaybackSession, position: float) -> PlaybackSession:
    # No progress before metadata: the position of an unresolved source is meaningless.
    if not session.duration_known or position is None or not math.isfinite(position):
        return session
    return dataclasses.replace(session, progress=min(max(float(position), 0.0), session.duration))


def ended(session: PlaybackSession) -> PlaybackSession:
    return dataclasses.replace(session, is_playing=False, progress=session.duration)
