"""
Catalog loading for the player.
Lists the bucket, signs playback URLs and derives display metadata, falling
back to the bundled demo songs whenever the remote catalog is unusable.
"""

import asyncio
import logging
from pathlib import PurePosixPath
from typing import Dict, List, Optional

from shared.constants import (
    ACCENT_PALETTE,
    CATALOG_LIST_LIMIT,
    CONTAINER_SEPARATOR,
    COVER_IMAGE_FORMATS,
    SIGNED_URL_TTL_SECONDS,
)
from shared.exceptions import CatalogUnavailableError, SigningError
from shared.models import Catalog, PlayerConfig, Track, fallback_tracks
from shared.naming import guess_artist_title, slugify, strip_extension
from setup_tool.provider_factory import StorageProviderFactory
from setup_tool.storage_provider import S3StorageProvider

logger = logging.getLogger(__name__)


class CatalogLoader:
    """
    Owns the catalog and refreshes it from the storage provider.

    The catalog starts out as the demo set (still flagged as loading) so the
    player has something to show before the first load resolves.
    """

    def __init__(self, config: Optional[PlayerConfig] = None,
                 provider: Optional[S3StorageProvider] = None):
        self.config = config
        self.provider = provider
        self.catalog = Catalog(tracks=fallback_tracks(), loading=True)

    async def load_catalog(self) -> Catalog:
        """
        Resolve the active track list.

        Never raises: any failure substitutes the complete demo set.
        ``catalog.loading`` is cleared exactly once per call.
        """
        self.catalog.loading = True
        try:
            tracks = await self._fetch_remote_tracks()
            self.catalog.tracks = tracks
            logger.info(f"Loaded {len(tracks)} tracks from bucket '{self._bucket_name()}'")
        except Exception as e:
            logger.warning(f"Falling back to demo songs: {e}")
            self.catalog.tracks = fallback_tracks()
        finally:
            self.catalog.loading = False
        return self.catalog

    def _bucket_name(self) -> Optional[str]:
        if self.provider and self.provider.bucket_name:
            return self.provider.bucket_name
        return self.config.bucket if self.config else None

    async def _connect(self) -> Optional[S3StorageProvider]:
        if self.provider is None and self.config is not None:
            self.provider = await asyncio.to_thread(StorageProviderFactory.connect, self.config)
        return self.provider

    async def _fetch_remote_tracks(self) -> List[Track]:
        provider = await self._connect()
        if provider is None:
            raise CatalogUnavailableError("Catalog source not configured")

        entries = await asyncio.to_thread(provider.list_files, None, CATALOG_LIST_LIMIT, 'key')
        if not entries:
            raise CatalogUnavailableError("No tracks in bucket", details=self._bucket_name())

        keys = [e['key'] for e in entries
                if e.get('key') and not e['key'].endswith(CONTAINER_SEPARATOR)]
        cover_keys = _pair_covers(keys)
        # Numbering and palette position follow the full listing
        songs = [(index, key) for index, key in enumerate(keys)
                 if key not in cover_keys.values()]

        urls = await asyncio.gather(*(self._sign(provider, key) for _, key in songs))
        covers = await asyncio.gather(*(
            self._sign(provider, cover_keys[strip_extension(key)])
            if strip_extension(key) in cover_keys else _none()
            for _, key in songs
        ))

        tracks: List[Track] = []
        used_ids: Dict[str, int] = {}
        for (index, key), url, cover in zip(songs, urls, covers):
            if not url:
                continue
            artist, title = guess_artist_title(key, len(keys))
            tracks.append(Track(
                id=_unique_id(slugify(key) or f"track-{index}", used_ids),
                title=title,
                artist=artist,
                duration=0,
                accent=ACCENT_PALETTE[index % len(ACCENT_PALETTE)],
                src=url,
                cover=cover,
            ))

        if not tracks:
            raise CatalogUnavailableError("No playable songs resolved")
        return tracks

    async def _sign(self, provider: S3StorageProvider, key: str) -> Optional[str]:
        """Signed URL for one object, None if signing failed (the entry is dropped)."""
        try:
            url = await asyncio.to_thread(provider.get_file_url, key, SIGNED_URL_TTL_SECONDS)
            if not url:
                raise SigningError("Provider returned no URL", key=key)
        except Exception as e:
            logger.warning(f"Failed to sign URL for {key}: {e}")
            return None
        return url


async def _none() -> None:
    return None


def _is_image(key: str) -> bool:
    return PurePosixPath(key).suffix.lower() in COVER_IMAGE_FORMATS


def _pair_covers(keys: List[str]) -> Dict[str, str]:
    """Map a song's stem to an image object with the same stem, e.g. ``a.mp3`` -> ``a.jpg``."""
    song_stems = {strip_extension(k) for k in keys if not _is_image(k)}
    return {
        strip_extension(k): k for k in keys
        if _is_image(k) and strip_extension(k) in song_stems
    }


def _unique_id(base: str, used: Dict[str, int]) -> str:
    count = used.get(base, 0)
    used[base] = count + 1
    return base if count == 0 else f"{base}-{count + 1}"
