"""
Generic S3-compatible storage provider.

Covers AWS S3 and any endpoint speaking the S3 API (MinIO, DigitalOcean
Spaces, ...). Cloudflare R2 builds on this with its own endpoint scheme.
"""

import logging
from typing import Optional, Dict, Any, List

import boto3
from botocore.exceptions import BotoCoreError, ClientError, NoCredentialsError

from shared.constants import AWS_S3_ENDPOINT_TEMPLATE, CONTAINER_SEPARATOR
from .storage_provider import S3StorageProvider

logger = logging.getLogger(__name__)


class S3CompatibleProvider(S3StorageProvider):
    """Storage implementation using the boto3 S3 client."""

    region_default = 'us-east-1'

    def __init__(self):
        self.s3_client = None
        self.bucket_name = None
        self.endpoint_url = None

    def _endpoint_for(self, credentials: Dict[str, str]) -> Optional[str]:
        if credentials.get('endpoint'):
            return credentials['endpoint']
        if credentials.get('region'):
            return AWS_S3_ENDPOINT_TEMPLATE.format(region=credentials['region'])
        return None

    def _region_for(self, credentials: Dict[str, str]) -> str:
        return credentials.get('region') or self.region_default

    def authenticate(self, credentials: Dict[str, str]) -> bool:
        """
        Authenticate against the S3 endpoint.

        Args:
            credentials: Must contain:
                - access_key_id
                - secret_access_key
                - bucket: Bucket holding the catalog
              and optionally endpoint / region.
        """
        try:
            self.endpoint_url = self._endpoint_for(credentials)
            self.bucket_name = credentials.get('bucket') or self.bucket_name

            self.s3_client = boto3.client(
                's3',
                endpoint_url=self.endpoint_url,
                aws_access_key_id=credentials['access_key_id'],
                aws_secret_access_key=credentials['secret_access_key'],
                region_name=self._region_for(credentials)
            )

            if self.bucket_name:
                self.s3_client.head_bucket(Bucket=self.bucket_name)
            return True

        except (ClientError, NoCredentialsError, BotoCoreError, KeyError) as e:
            logger.warning(f"{type(self).__name__} authentication failed: {e}")
            return False

    def list_files(self, prefix: Optional[str] = None, limit: Optional[int] = None,
                   sort_by: str = 'key') -> List[Dict[str, Any]]:
        """
        List the top level of the bucket, at most ``limit`` entries.

        Sub-folders come back as CommonPrefixes and are listed as
        ``folder/`` keys so callers can skip them.
        """
        try:
            kwargs = {'Bucket': self.bucket_name, 'Delimiter': CONTAINER_SEPARATOR}
            if prefix:
                kwargs['Prefix'] = prefix
            if limit:
                kwargs['PaginationConfig'] = {'MaxItems': limit}

            files = []
            paginator = self.s3_client.get_paginator('list_objects_v2')

            for page in paginator.paginate(**kwargs):
                for obj in page.get('Contents', []):
                    files.append({
                        'key': obj['Key'],
                        'size': obj.get('Size', 0),
                        'modified': obj['LastModified'].isoformat() if obj.get('LastModified') else None,
                    })
                for common in page.get('CommonPrefixes', []):
                    files.append({'key': common['Prefix'], 'size': 0, 'modified': None})

            return self._sorted_and_capped(files, limit, sort_by)

        except (ClientError, BotoCoreError) as e:
            logger.warning(f"List files failed: {e}")
            return []

    def get_file_url(self, remote_key: str, expires_in: int = 3600) -> str:
        """Generate presigned URL for object access."""
        try:
            return self.s3_client.generate_presigned_url(
                'get_object',
                Params={'Bucket': self.bucket_name, 'Key': remote_key},
                ExpiresIn=expires_in
            )
        except (ClientError, BotoCoreError) as e:
            logger.warning(f"URL generation failed for {remote_key}: {e}")
            return ""
