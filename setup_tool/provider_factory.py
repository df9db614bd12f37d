"""
Factory for creating storage provider instances.

Simplifies provider selection and initialization.
"""

import logging
from typing import Optional

from shared.models import StorageProvider, PlayerConfig
from .storage_provider import S3StorageProvider
from .s3_compatible import S3CompatibleProvider
from .cloudflare_r2 import CloudflareR2Provider
from .backblaze_b2 import BackblazeB2Provider
from .local_provider import LocalStorageProvider

logger = logging.getLogger(__name__)


class StorageProviderFactory:
    """Factory for creating storage provider instances."""

    @staticmethod
    def create(provider_type: StorageProvider) -> S3StorageProvider:
        """
        Create a storage provider instance.

        Raises:
            ValueError: If provider type is not supported
        """
        if provider_type == StorageProvider.CLOUDFLARE_R2:
            return CloudflareR2Provider()

        elif provider_type == StorageProvider.BACKBLAZE_B2:
            return BackblazeB2Provider()

        elif provider_type in (StorageProvider.AWS_S3, StorageProvider.GENERIC_S3):
            return S3CompatibleProvider()

        elif provider_type == StorageProvider.LOCAL:
            return LocalStorageProvider()

        else:
            raise ValueError(f"Unknown provider type: {provider_type}")

    @staticmethod
    def connect(config: Optional[PlayerConfig]) -> Optional[S3StorageProvider]:
        """
        Create and authenticate the provider described by ``config``.

        Returns:
            An authenticated provider, or None when unconfigured or when
            authentication fails.
        """
        if config is None:
            return None
        provider = StorageProviderFactory.create(config.provider)
        if not provider.authenticate(config.credentials()):
            logger.warning(f"Could not authenticate with {StorageProviderFactory.get_provider_name(config.provider)}")
            return None
        provider.bucket_name = config.bucket
        return provider

    @staticmethod
    def get_provider_name(provider_type: StorageProvider) -> str:
        """Get human-readable provider name."""
        names = {
            StorageProvider.CLOUDFLARE_R2: "Cloudflare R2",
            StorageProvider.BACKBLAZE_B2: "Backblaze B2",
            StorageProvider.AWS_S3: "Amazon S3",
            StorageProvider.GENERIC_S3: "Generic S3-Compatible",
            StorageProvider.LOCAL: "Local Directory",
        }
        return names.get(provider_type, "Unknown")
