"""
Backblaze B2 catalog source.

Lists a B2 bucket and hands out download-authorized URLs for playback.
"""

import logging
from typing import Optional, Dict, Any, List

from b2sdk.v2 import B2Api, InMemoryAccountInfo
from b2sdk.v2.exception import B2Error

from .storage_provider import S3StorageProvider

logger = logging.getLogger(__name__)


class BackblazeB2Provider(S3StorageProvider):
    """
    Backblaze B2 storage implementation using b2sdk.

    Playback URLs carry a download authorization token scoped to the object.
    """

    def __init__(self):
        self.api = B2Api(InMemoryAccountInfo())
        self.bucket = None
        self.bucket_name = None

    def authenticate(self, credentials: Dict[str, str]) -> bool:
        """
        Authenticate with Backblaze B2.

        Args:
            credentials: Must contain:
                - application_key_id: B2 application key ID
                - application_key: B2 application key
                - bucket: Bucket name
        """
        try:
            self.api.authorize_account(
                'production',
                credentials['application_key_id'],
                credentials['application_key']
            )

            if credentials.get('bucket'):
                self.bucket_name = credentials['bucket']
                self.bucket = self.api.get_bucket_by_name(self.bucket_name)

            return True

        except (B2Error, KeyError) as e:
            logger.warning(f"B2 authentication failed: {e}")
            return False

    def list_files(self, prefix: Optional[str] = None, limit: Optional[int] = None,
                   sort_by: str = 'key') -> List[Dict[str, Any]]:
        """List the top level of the bucket; sub-folders are reported with a trailing '/'."""
        if not self.bucket:
            return []
        try:
            files = []
            for file_version, folder_name in self.bucket.ls(folder_to_list=prefix or ''):
                if folder_name:
                    files.append({'key': folder_name, 'size': 0, 'modified': None})
                    continue
                files.append({
                    'key': file_version.file_name,
                    'size': file_version.size,
                    'modified': str(file_version.upload_timestamp),
                })
            return self._sorted_and_capped(files, limit, sort_by)

        except B2Error as e:
            logger.warning(f"List files failed: {e}")
            return []

    def get_file_url(self, remote_key: str, expires_in: int = 3600) -> str:
        """Get an authorized download URL for an object."""
        if not self.bucket:
            return ""
        try:
            auth_token = self.bucket.get_download_authorization(remote_key, expires_in)
            return f"{self.bucket.get_download_url(remote_key)}?Authorization={auth_token}"
        except B2Error as e:
            logger.warning(f"URL generation failed for {remote_key}: {e}")
            return ""
