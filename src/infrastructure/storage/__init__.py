"""
Object storage integration for the video library.

Supports R2, S3 and other S3-compatible stores via boto3.
Includes mock mode for local development without credentials.
"""

from .client import (
    MockStorageClient,
    ObjectNotFoundError,
    R2StorageClient,
    StorageClient,
    StorageConfig,
    StorageError,
    create_storage_client,
)

__all__ = [
    "MockStorageClient",
    "ObjectNotFoundError",
    "R2StorageClient",
    "StorageClient",
    "StorageConfig",
    "StorageError",
    "create_storage_client",
]
