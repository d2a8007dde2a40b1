"""
FastAPI dependency injection.

Dependencies provide instances of services, clients, and configuration
to route handlers. Using dependency injection means:
- Routes don't instantiate their own dependencies (easier to test)
- Dependencies can be overridden in tests
- Configuration is centralized

Each dependency is a function that FastAPI calls when needed.
"""

import logging
from typing import Annotated

from fastapi import Depends

from ..config.settings import Settings, get_settings
from ..core.library.bundle import BundleBuilder
from ..core.library.folders import LanguageFolderInitializer
from ..infrastructure.storage.client import StorageClient, StorageConfig, create_storage_client

logger = logging.getLogger(__name__)

# Global mock instance (shared across requests for testing)
_mock_storage_client = None


def build_storage_client(settings: Settings) -> StorageClient:
    """Create a storage client from settings, reusing the shared mock."""
    global _mock_storage_client

    if settings.storage_mock_mode:
        # Use shared mock client (persists across requests)
        if _mock_storage_client is None:
            _mock_storage_client = create_storage_client(mock_mode=True)
            logger.info("Created shared mock storage client for session")
        return _mock_storage_client

    config = StorageConfig(
        bucket_name=settings.storage_bucket,
        access_key_id=settings.storage_access_key_id,
        secret_access_key=settings.storage_secret_access_key,
        endpoint_url=settings.storage_endpoint_url,
        region=settings.storage_region,
    )
    return create_storage_client(config=config)


def reset_mock_storage() -> None:
    """Drop the shared mock client. Used between tests."""
    global _mock_storage_client
    _mock_storage_client = None


def get_storage_client(
    settings: Annotated[Settings, Depends(get_settings)],
) -> StorageClient:
    """
    Provide storage client for bundle and folder operations.

    Returns either the S3-compatible client or the mock client based on settings.
    """
    return build_storage_client(settings)


def get_bundle_builder(
    storage: Annotated[StorageClient, Depends(get_storage_client)],
) -> BundleBuilder:
    """The builder is stateless, so we create a new instance per request."""
    return BundleBuilder(storage)


def get_folder_initializer(
    settings: Annotated[Settings, Depends(get_settings)],
    storage: Annotated[StorageClient, Depends(get_storage_client)],
) -> LanguageFolderInitializer:
    """Initializer with the configured language list injected."""
    return LanguageFolderInitializer(
        storage,
        default_languages=settings.supported_languages_list,
    )


# ---------------------------------------------------------------------------
# Convenience Type Aliases
# ---------------------------------------------------------------------------

# These type aliases make route signatures cleaner
StorageClientDep = Annotated[StorageClient, Depends(get_storage_client)]
BundleBuilderDep = Annotated[BundleBuilder, Depends(get_bundle_builder)]
FolderInitializerDep = Annotated[LanguageFolderInitializer, Depends(get_folder_initializer)]
SettingsDep = Annotated[Settings, Depends(get_settings)]
