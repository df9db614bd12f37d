"""
Display metadata derived from object and file names.
"""
import re
from pathlib import PurePosixPath
from typing import Tuple
from urllib.parse import unquote

from shared.constants import ARTIST_TITLE_DELIMITER, UNKNOWN_ARTIST

_WORD_SPLIT = re.compile(r"[\s_]+")
_EXTENSION = re.compile(r"\.[^/.]+$")
_NON_SLUG = re.compile(r"[^a-z0-9]+")


def title_case(value: str) -> str:
    """Uppercase the first character of every whitespace/underscore separated token."""
    return " ".join(part[0].upper() + part[1:] for part in _WORD_SPLIT.split(value) if part)


def strip_extension(name: str) -> str:
    return _EXTENSION.sub("", name)


def clean_object_name(key: str) -> str:
    """Last path segment of an object key, extension removed and percent-decoded."""
    return unquote(strip_extension(PurePosixPath(key).name))


def guess_artist_title(key: str, file_count: int) -> Tuple[str, str]:
    """
    Split ``"Artist - Title.ext"`` into display strings.

    The split is only trusted when both halves are non-empty and the
    listing holds more than one file; otherwise the whole name becomes the
    title and the artist is unknown.

    Returns:
        (artist, title)
    """
    base = clean_object_name(key)
    parts = base.split(ARTIST_TITLE_DELIMITER)
    # Anything after a second delimiter is dropped: "A - B - C" -> ("A", "B")
    if len(parts) >= 2 and parts[0].strip() and parts[1].strip() and file_count > 1:
        return title_case(parts[0]), title_case(parts[1])
    return UNKNOWN_ARTIST, title_case(base)


def slugify(value: str) -> str:
    return _NON_SLUG.sub("-", value.lower()).strip("-")


def _tidy(value: str) -> str:
    return title_case(" ".join(value.lower().replace("_", " ").split()))


def guess_manifest_metadata(filename: str) -> Tuple[str, str]:
    """
    Metadata guess used when building a local manifest.

    Unlike remote listings the artist split is always attempted and
    everything after the first delimiter is kept in the title.

    Returns:
        (artist, title)
    """
    cleaned = " ".join(strip_extension(PurePosixPath(filename).name).replace("_", " ").split())
    parts = cleaned.split(ARTIST_TITLE_DELIMITER)
    if len(parts) >= 2:
        return _tidy(parts[0]), _tidy(ARTIST_TITLE_DELIMITER.join(parts[1:]))
    return UNKNOWN_ARTIST, _tidy(cleaned)
