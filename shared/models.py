"""
Data models for tracks, the catalog and player configuration.

This module defines the core data structures shared by the catalog loader,
the playback controller and the HTTP surface.
"""

from dataclasses import dataclass, asdict, field
from typing import List, Dict, Optional, Any
from enum import Enum
import dataclasses
import json
import math


class StorageProvider(Enum):
    """Supported catalog storage providers."""
    CLOUDFLARE_R2 = "r2"
    BACKBLAZE_B2 = "b2"
    AWS_S3 = "s3"
    GENERIC_S3 = "generic"
    LOCAL = "local"


@dataclass
class Track:
    """
    Represents a single playable track.

    Attributes:
        id: Stable identifier
        title: Display title
        artist: Display artist
        duration: Duration in seconds (0 until the media element resolves it)
        accent: Accent colour taken from the palette by catalog position
        src: Playable locator (signed URL or path)
        cover: Optional cover image locator
    """
    id: str
    title: str
    artist: str
    duration: float = 0
    accent: str = "#1db954"
    src: str = ""
    cover: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert track to dictionary."""
        return asdict(self)


@dataclass
class Catalog:
    """
    Ordered list of tracks known to the session.

    Insertion order drives numbering and skip navigation. Once a load has
    completed the list is never empty.
    """
    tracks: List[Track] = field(default_factory=list)
    loading: bool = False

    def __len__(self) -> int:
        return len(self.tracks)

    def __iter__(self):
        return iter(self.tracks)

    def get_track_by_id(self, track_id: str) -> Optional[Track]:
        """Find track by ID."""
        for track in self.tracks:
            if track.id == track_id:
                return track
        return None


_FALLBACK_DATA = [
    ("aurora-echoes", "Aurora Echoes", "Synth Lab", "#1db954"),
    ("sunset-drive", "Sunset Drive", "Neon Nights", "#20c997"),
    ("opalescent-sky", "Opalescent Sky", "Lumen Bloom", "#64b5f6"),
    ("midnight-canvas", "Midnight Canvas", "Violet Wave", "#9575cd"),
    ("luminous-trails", "Luminous Trails", "Mirage Bloom", "#ff8a65"),
]


def fallback_tracks() -> List[Track]:
    """
    Return a fresh copy of the bundled demo tracks.

    A new list is built on every call since durations are refined in place
    once a track has been played.
    """
    return [
        Track(id=track_id, title=title, artist=artist, duration=0,
              accent=accent, src=f"songs/{track_id}.wav")
        for track_id, title, artist, accent in _FALLBACK_DATA
    ]


def format_time(seconds: float) -> str:
    """Format seconds as mm:ss; non-finite values render as 00:00."""
    if seconds is None or not math.isfinite(seconds):
        return "00:00"
    minutes = int(seconds // 60)
    secs = int(seconds % 60)
    return f"{minutes:02d}:{secs:02d}"


@dataclass
class PlayerConfig:
    """
    Player configuration stored locally on each device.

    Contains credentials for the catalog bucket.
    """
    provider: StorageProvider
    bucket: str = "songs"
    endpoint: Optional[str] = None
    access_key_id: Optional[str] = None
    secret_access_key: Optional[str] = None
    region: Optional[str] = None

    def credentials(self) -> Dict[str, str]:
        """Build the credential mapping a storage provider authenticates with."""
        if self.provider == StorageProvider.LOCAL:
            return {'base_path': self.endpoint or '', 'bucket': self.bucket}

        if self.provider == StorageProvider.BACKBLAZE_B2:
            return {
                'application_key_id': self.access_key_id or '',
                'application_key': self.secret_access_key or '',
                'bucket': self.bucket,
            }

        creds = {
            'access_key_id': self.access_key_id or '',
            'secret_access_key': self.secret_access_key or '',
            'bucket': self.bucket,
        }
        if self.endpoint:
            creds['endpoint'] = self.endpoint
        if self.region:
            creds['region'] = self.region
        if self.provider == StorageProvider.CLOUDFLARE_R2 and self.endpoint:
            # https://<account_id>.r2.cloudflarestorage.com
            creds['account_id'] = self.endpoint.split('//')[-1].split('.')[0]
        return creds

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['provider'] = self.provider.value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PlayerConfig':
        """Create PlayerConfig from dictionary, ignoring unknown keys."""
        field_names = {f.name for f in dataclasses.fields(cls)}
        filtered_data = {k: v for k, v in data.items() if k in field_names}
        filtered_data['provider'] = StorageProvider(filtered_data['provider'])
        return cls(**filtered_data)

    def to_json(self, indent: int = 2) -> str:
        """Serialize to JSON."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_json(cls, json_str: str) -> 'PlayerConfig':
        """Deserialize from JSON."""
        return cls.from_dict(json.loads(json_str))
