"""
Object storage client for the video library.

Supports any S3-compatible bucket (Cloudflare R2, AWS S3, MinIO, GCS
interoperability endpoints) with a mock mode for local development.

The bundle builder and folder initializer only need a tiny surface:
- list object names under a prefix
- check whether anything exists under a prefix
- write a whole object (overwrite)
- read a whole object back

Mock mode keeps objects in memory, enabling API testing without
provisioning actual object storage.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Protocol

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when storage operations fail."""
    pass


class ObjectNotFoundError(StorageError):
    """Raised when a requested object does not exist."""
    pass


@dataclass
class StorageConfig:
    """
    Configuration for S3-compatible storage.

    Empty credentials mean boto3 falls back to its default credential
    chain (environment, instance profile, etc.).
    """
    bucket_name: str
    access_key_id: str = ""
    secret_access_key: str = ""
    endpoint_url: Optional[str] = None
    region: str = "auto"


class StorageClient(Protocol):
    """
    Protocol for object storage operations.

    Using a protocol means tests can provide mocks and we can
    swap storage backends without changing dependent code.
    """

    async def list_objects(
        self,
        prefix: str,
        max_results: Optional[int] = None,
    ) -> list[str]:
        """List object names under prefix, following all pages."""
        ...

    async def exists(self, prefix: str) -> bool:
        """True if at least one object exists under prefix."""
        ...

    async def write_object(
        self,
        path: str,
        content: bytes,
        content_type: str,
        metadata: Optional[dict[str, str]] = None,
    ) -> None:
        """Write an object, replacing any previous content."""
        ...

    async def read_object(self, path: str) -> bytes:
        """Read a whole object."""
        ...


class R2StorageClient:
    """
    S3-compatible object storage client.

    Uses boto3 because R2 (and most other object stores) speak the S3 API.

    All methods are async to match the Protocol even though boto3 is
    synchronous. This keeps the interface consistent with truly async
    storage clients.
    """

    def __init__(self, config: StorageConfig) -> None:
        """
        Initialize the client with boto3.

        boto3 is imported here (not at module level) so mock mode
        never needs it.
        """
        try:
            import boto3
            from botocore.config import Config
        except ImportError:
            raise ImportError(
                "boto3 is required for object storage. Install with: pip install boto3"
            )

        self._config = config

        boto_config = Config(
            signature_version='s3v4',
            s3={'addressing_style': 'path'},
        )

        client_kwargs = {
            'region_name': config.region,
            'config': boto_config,
        }
        if config.endpoint_url:
            client_kwargs['endpoint_url'] = config.endpoint_url
        if config.access_key_id and config.secret_access_key:
            client_kwargs['aws_access_key_id'] = config.access_key_id
            client_kwargs['aws_secret_access_key'] = config.secret_access_key

        self._s3_client = boto3.client('s3', **client_kwargs)

        logger.info(
            "Initialized object storage client",
            extra={
                "bucket": config.bucket_name,
                "endpoint": config.endpoint_url,
            }
        )

    async def list_objects(
        self,
        prefix: str,
        max_results: Optional[int] = None,
    ) -> list[str]:
        """
        List object names under a prefix.

        Follows continuation tokens through every page, so listings
        larger than a single page (1000 keys on S3) come back whole.
        Names are returned in the order the service reports them.
        """
        names: list[str] = []
        pagination = {}
        if max_results is not None:
            pagination['MaxItems'] = max_results
            pagination['PageSize'] = min(max_results, 1000)

        try:
            paginator = self._s3_client.get_paginator('list_objects_v2')
            pages = paginator.paginate(
                Bucket=self._config.bucket_name,
                Prefix=prefix,
                PaginationConfig=pagination,
            )
            for page in pages:
                for obj in page.get('Contents', []):
                    names.append(obj['Key'])
                    if max_results is not None and len(names) >= max_results:
                        return names

            logger.debug(
                "Listed objects",
                extra={"prefix": prefix, "count": len(names)}
            )

            return names

        except Exception as e:
            logger.error(
                "Failed to list objects",
                extra={"prefix": prefix, "error": str(e)}
            )
            raise StorageError(f"List failed: {e}")

    async def exists(self, prefix: str) -> bool:
        """Existence probe limited to a single result."""
        names = await self.list_objects(prefix, max_results=1)
        return len(names) > 0

    async def write_object(
        self,
        path: str,
        content: bytes,
        content_type: str,
        metadata: Optional[dict[str, str]] = None,
    ) -> None:
        """Upload a whole object, overwriting whatever was there."""
        try:
            self._s3_client.put_object(
                Bucket=self._config.bucket_name,
                Key=path,
                Body=content,
                ContentType=content_type,
                Metadata=metadata or {},
            )

            logger.debug(
                "Wrote object",
                extra={"path": path, "size_bytes": len(content)}
            )

        except Exception as e:
            logger.error(
                "Failed to write object",
                extra={"path": path, "error": str(e)}
            )
            raise StorageError(f"Write failed: {e}")

    async def read_object(self, path: str) -> bytes:
        """Download a whole object."""
        try:
            response = self._s3_client.get_object(
                Bucket=self._config.bucket_name,
                Key=path,
            )

            return response['Body'].read()

        except self._s3_client.exceptions.NoSuchKey:
            raise ObjectNotFoundError(f"Object not found: {path}")
        except Exception as e:
            logger.error(
                "Failed to read object",
                extra={"path": path, "error": str(e)}
            )
            raise StorageError(f"Read failed: {e}")


# ---------------------------------------------------------------------------
# Mock Storage for Local Development
# ---------------------------------------------------------------------------

@dataclass
class StoredObject:
    """An object held by the mock client."""
    content: bytes
    content_type: str
    metadata: dict[str, str]


class MockStorageClient:
    """
    In-memory storage for local development.

    Listings come back in lexicographic key order, the same order S3
    reports them in.

    Not suitable for production, but perfect for development and testing.
    """

    def __init__(self) -> None:
        # {object name: StoredObject}
        self._objects: dict[str, StoredObject] = {}
        logger.info("Initialized mock storage client (in-memory)")

    async def list_objects(
        self,
        prefix: str,
        max_results: Optional[int] = None,
    ) -> list[str]:
        names = sorted(key for key in self._objects if key.startswith(prefix))
        if max_results is not None:
            names = names[:max_results]
        return names

    async def exists(self, prefix: str) -> bool:
        names = await self.list_objects(prefix, max_results=1)
        return len(names) > 0

    async def write_object(
        self,
        path: str,
        content: bytes,
        content_type: str,
        metadata: Optional[dict[str, str]] = None,
    ) -> None:
        """Store object in memory."""
        self._objects[path] = StoredObject(
            content=content,
            content_type=content_type,
            metadata=dict(metadata or {}),
        )

        logger.debug(
            "Stored object in mock storage",
            extra={"path": path, "size_bytes": len(content)}
        )

    async def read_object(self, path: str) -> bytes:
        """Retrieve object from memory."""
        if path not in self._objects:
            raise ObjectNotFoundError(f"Object not found: {path}")

        return self._objects[path].content

    def get_stored(self, path: str) -> Optional[StoredObject]:
        """Inspect a stored object, including its metadata."""
        return self._objects.get(path)


# ---------------------------------------------------------------------------
# Factory Function
# ---------------------------------------------------------------------------

def create_storage_client(
    config: Optional[StorageConfig] = None,
    mock_mode: bool = False,
) -> StorageClient:
    """
    Create storage client based on configuration.

    Args:
        config: Storage configuration (required if not mock_mode)
        mock_mode: If True, return mock client for testing

    Returns:
        StorageClient implementation (S3-compatible or Mock)
    """
    if mock_mode:
        return MockStorageClient()

    if config is None:
        raise ValueError("config is required when not in mock mode")

    return R2StorageClient(config)
