"""
Manifest builder for a local songs directory.

Scans a directory for audio files and writes ``manifest.json`` describing
them as catalog tracks, so a static deployment can ship its own track list.
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from shared.constants import MANIFEST_FILENAME, MANIFEST_PALETTE
from shared.models import Track
from shared.naming import guess_manifest_metadata, slugify
from .audio import AudioProcessor

logger = logging.getLogger(__name__)


def scan_songs(songs_dir: Path, src_prefix: str = "songs") -> List[Track]:
    """Build tracks for every supported audio file directly inside ``songs_dir``."""
    entries = sorted(
        (p for p in Path(songs_dir).iterdir() if p.is_file() and AudioProcessor.is_supported_format(p.name)),
        key=lambda p: p.name,
    )

    tracks = []
    for index, path in enumerate(entries):
        artist, title = guess_manifest_metadata(path.name)
        tracks.append(Track(
            id=slugify(path.name),
            title=title,
            artist=artist,
            duration=AudioProcessor.read_duration(str(path)),
            accent=MANIFEST_PALETTE[index % len(MANIFEST_PALETTE)],
            src=f"{src_prefix}/{path.name}",
        ))
    return tracks


def build_manifest(songs_dir: Path, output: Optional[Path] = None) -> Dict[str, Any]:
    """
    Write the manifest for ``songs_dir``.

    Args:
        songs_dir: Directory holding the audio files
        output: Manifest path (defaults to ``songs_dir/manifest.json``)

    Returns:
        The manifest data that was written
    """
    songs_dir = Path(songs_dir)
    output = Path(output) if output else songs_dir / MANIFEST_FILENAME

    songs = scan_songs(songs_dir)
    manifest = {
        "generatedAt": datetime.now(timezone.utc).isoformat(),
        "songs": [track.to_dict() for track in songs],
    }
    output.write_text(json.dumps(manifest, indent=2), encoding="utf-8")
    logger.info(f"Manifest written with {len(songs)} songs -> {output}")
    return manifest

