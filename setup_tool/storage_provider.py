"""
Abstract base class for catalog storage providers.

This module defines the interface the catalog loader needs from a bucket:
list its objects and hand out time-limited playback URLs. Cloudflare R2,
Backblaze B2, AWS S3, generic S3 endpoints and a local directory all
implement it.
"""

from abc import ABC, abstractmethod
from typing import Optional, Dict, Any, List


class S3StorageProvider(ABC):
    """
    Abstract base class for catalog storage providers.

    Providers report failures the way boto3 callers usually do here: the
    error is logged and a falsy result (``[]``, ``""``, ``False``) returned.
    """

    bucket_name: Optional[str] = None

    @abstractmethod
    def authenticate(self, credentials: Dict[str, str]) -> bool:
        """
        Authenticate with the storage provider.

        Args:
            credentials: Dictionary containing authentication credentials
                        (access_key_id, secret_access_key, endpoint, bucket, etc.)

        Returns:
            True if authentication successful, False otherwise
        """
        pass

    @abstractmethod
    def list_files(self, prefix: Optional[str] = None, limit: Optional[int] = None,
                   sort_by: str = 'key') -> List[Dict[str, Any]]:
        """
        List objects in the bucket.

        Args:
            prefix: Optional prefix to filter objects
            limit: Maximum number of entries to return
            sort_by: Field to sort ascending by ('key' or 'modified')

        Returns:
            List of dictionaries with object information (key, size, modified)
        """
        pass

    @abstractmethod
    def get_file_url(self, remote_key: str, expires_in: int = 3600) -> str:
        """
        Get a URL for accessing an object.

        Args:
            remote_key: Key (path) of the object
            expires_in: Expiration time in seconds (for presigned URLs)

        Returns:
            URL string, or an empty string if signing failed
        """
        pass

    @staticmethod
    def _sorted_and_capped(files: List[Dict[str, Any]], limit: Optional[int],
                           sort_by: str) -> List[Dict[str, Any]]:
        files = sorted(files, key=lambda f: f.get(sort_by) or '')
        if limit is not None:
            files = files[:limit]
        return files
