"""
Bundle construction.

The builder is always a full recompute from the current object listing.
It never merges with the previous snapshot, so any rebuild converges to
the true state of storage regardless of missed or duplicated triggers.
"""

import json
import logging
from typing import Any, Iterable

from ...infrastructure.storage.client import ObjectNotFoundError, StorageClient
from .models import Bundle, VideoEntry
from .paths import bundle_path, namespace_prefix, parse_asset_path

logger = logging.getLogger(__name__)

BUNDLE_CONTENT_TYPE = "application/json"


class BundleNotFoundError(Exception):
    """Raised when a namespace has no snapshot yet."""
    pass


def assemble_bundle(
    clinic: str,
    department: str,
    object_names: Iterable[str],
) -> Bundle:
    """
    Group a listing into a bundle.

    Videos keep first-encounter order and languages keep insertion order.
    When the same (video, language, extension) shows up more than once,
    the last name in listing order wins.
    """
    videos: dict[str, VideoEntry] = {}
    skipped = 0

    for name in object_names:
        asset = parse_asset_path(name)
        if asset is None or asset.clinic != clinic or asset.department != department:
            skipped += 1
            logger.debug("Skipping non-asset object", extra={"object_name": name})
            continue

        if asset.video_id not in videos:
            videos[asset.video_id] = VideoEntry(id=asset.video_id)
        videos[asset.video_id].language(asset.language).assign(asset)

    logger.debug(
        "Assembled bundle",
        extra={
            "clinic": clinic,
            "department": department,
            "videos": len(videos),
            "skipped": skipped,
        }
    )

    return Bundle(clinic=clinic, department=department, videos=list(videos.values()))


def serialize_bundle(bundle: Bundle) -> bytes:
    """Encode a bundle as the snapshot file content."""
    return json.dumps(bundle.to_dict(), indent=2, ensure_ascii=False).encode("utf-8")


class BundleBuilder:
    """
    Rebuilds and reads namespace bundles.

    Stateless apart from the storage client, so one instance can serve
    any number of concurrent rebuilds.
    """

    def __init__(self, storage: StorageClient) -> None:
        self._storage = storage

    async def build(self, clinic: str, department: str) -> str:
        """
        Recompute the bundle of a namespace and write it.

        Storage failures propagate. The snapshot is written once, at the
        end, so a failed listing leaves the previous snapshot untouched.

        Returns the snapshot path.
        """
        names = await self._storage.list_objects(namespace_prefix(clinic, department))
        bundle = assemble_bundle(clinic, department, names)

        path = bundle_path(clinic, department)
        await self._storage.write_object(
            path,
            serialize_bundle(bundle),
            BUNDLE_CONTENT_TYPE,
        )

        logger.info(
            "Bundle written",
            extra={
                "clinic": clinic,
                "department": department,
                "bundle_path": path,
                "objects_listed": len(names),
                "videos": len(bundle.videos),
            }
        )

        return path

    async def load(self, clinic: str, department: str) -> dict[str, Any]:
        """Read the current snapshot of a namespace."""
        path = bundle_path(clinic, department)
        try:
            content = await self._storage.read_object(path)
        except ObjectNotFoundError:
            raise BundleNotFoundError(f"No bundle at {path}")

        return json.loads(content)
