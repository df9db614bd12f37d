"""
Cloudflare R2 storage provider implementation.

Cloudflare R2 is S3-compatible and offers zero egress fees, making it ideal
for music streaming use cases.
"""

from typing import Dict, Optional

from shared.constants import CLOUDFLARE_R2_ENDPOINT_TEMPLATE
from .s3_compatible import S3CompatibleProvider


class CloudflareR2Provider(S3CompatibleProvider):
    """
    Cloudflare R2 storage implementation using boto3 S3 client.

    Credentials must carry either ``account_id`` or a full ``endpoint``.
    """

    region_default = 'auto'  # R2 uses 'auto' region

    def __init__(self):
        super().__init__()
        self.account_id = None

    def _endpoint_for(self, credentials: Dict[str, str]) -> Optional[str]:
        self.account_id = credentials.get('account_id')
        if self.account_id:
            return CLOUDFLARE_R2_ENDPOINT_TEMPLATE.format(account_id=self.account_id)
        return credentials['endpoint']

    def _region_for(self, credentials: Dict[str, str]) -> str:
        return self.region_default
