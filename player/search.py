"""
Search filtering over the catalog.
"""

from typing import Iterable, List, Optional

from shared.models import Track


def normalize_query(query: Optional[str]) -> str:
    return (query or "").strip().casefold()


def filter_tracks(tracks: Iterable[Track], query: Optional[str]) -> List[Track]:
    """
    Tracks whose title or artist contains ``query``, case-insensitively.

    A blank query means no filter. Catalog order is preserved.
    """
    tracks = list(tracks)
    needle = normalize_query(query)
    if not needle:
        return tracks
    return [
        track for track in tracks
        if needle in track.title.casefold() or needle in track.artist.casefold()
    ]
