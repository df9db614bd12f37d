"""
Local filesystem storage provider.
Implements the S3StorageProvider interface over a directory.
"""

import logging
from pathlib import Path
from typing import Optional, Dict, Any, List

from .storage_provider import S3StorageProvider

logger = logging.getLogger(__name__)


class LocalStorageProvider(S3StorageProvider):
    """
    Storage provider that uses the local filesystem.
    Useful for self-hosting from a NAS or local drive. The bucket is a
    sub-directory of ``base_path``; '.' or '' use ``base_path`` directly.
    """

    def __init__(self):
        self.base_path: Optional[Path] = None
        self.bucket_name: Optional[str] = None

    def authenticate(self, credentials: Dict[str, str]) -> bool:
        """'Authenticate' by checking the base path is a directory."""
        path = credentials.get('base_path') or credentials.get('endpoint')
        if not path:
            return False

        self.base_path = Path(path).expanduser().absolute()
        self.bucket_name = credentials.get('bucket', self.bucket_name)
        if not self._bucket_root().is_dir():
            logger.warning(f"Local bucket {self._bucket_root()} does not exist")
            return False
        return True

    def _bucket_root(self) -> Path:
        if self.bucket_name in (None, ".", "", "default"):
            return self.base_path
        return self.base_path / self.bucket_name

    def _get_path(self, remote_key: str) -> Path:
        """Get absolute local path for a remote key."""
        if self.base_path is None:
            raise ValueError("Provider not authenticated")
        return self._bucket_root() / remote_key

    def list_files(self, prefix: Optional[str] = None, limit: Optional[int] = None,
                   sort_by: str = 'key') -> List[Dict[str, Any]]:
        """List direct children; directories come back with a trailing '/'."""
        search_path = self._bucket_root()
        if prefix:
            search_path = search_path / prefix
        if not search_path.is_dir():
            return []

        files = []
        try:
            for entry in search_path.iterdir():
                rel = entry.relative_to(self._bucket_root()).as_posix()
                if entry.is_dir():
                    files.append({'key': rel + '/', 'size': 0, 'modified': None})
                    continue
                stat = entry.stat()
                files.append({'key': rel, 'size': stat.st_size, 'modified': str(stat.st_mtime)})
        except OSError as e:
            logger.warning(f"List files failed: {e}")
            return []

        return self._sorted_and_capped(files, limit, sort_by)

    def get_file_url(self, remote_key: str, expires_in: int = 3600) -> str:
        """Return a file:// URL; local files never expire."""
        path = self._get_path(remote_key)
        if not path.is_file():
            return ""
        return path.absolute().as_uri()
