"""
Storage notification handling.

Upload and delete notifications are fire-and-forget: whatever delivers
them has no retry contract, so failures are logged and suppressed here
instead of surfacing as unhandled background errors. Correctness comes
from the builder being a full recompute; the next notification fixes
anything a failed one missed.
"""

import logging
import urllib.parse
from typing import Any, Optional, Sequence

from .bundle import BundleBuilder
from .folders import LanguageFolderInitializer
from .paths import parse_namespace

logger = logging.getLogger(__name__)

CREATED_EVENT_PREFIX = "ObjectCreated:"
REMOVED_EVENT_PREFIX = "ObjectRemoved:"


async def handle_object_created(
    object_name: str,
    builder: BundleBuilder,
    initializer: LanguageFolderInitializer,
    languages: Optional[Sequence[str]] = None,
) -> None:
    """Rebuild the namespace bundle and provision folders for the video."""
    namespace = parse_namespace(object_name)
    if namespace is None:
        logger.debug("Ignoring upload outside videos/", extra={"object_name": object_name})
        return

    clinic, department, video = namespace

    logger.info(
        f"[UPLOAD] {object_name} -> updating bundle for {clinic}/{department}",
        extra={"object_name": object_name, "clinic": clinic, "department": department}
    )
    try:
        await builder.build(clinic, department)
        logger.info(f"[UPLOAD] Bundle updated for {clinic}/{department}")
    except Exception:
        logger.error("[UPLOAD] Error updating bundle", exc_info=True)

    if video is None:
        return

    logger.info(
        f"[LANGUAGE FOLDERS] {object_name} -> creating folders for {clinic}/{department}/{video}"
    )
    try:
        await initializer.ensure_language_folders(clinic, department, video, languages)
        logger.info(f"[LANGUAGE FOLDERS] Folders ready for {clinic}/{department}/{video}")
    except Exception:
        logger.error("[LANGUAGE FOLDERS] Error creating folders", exc_info=True)


async def handle_object_deleted(object_name: str, builder: BundleBuilder) -> None:
    """Rebuild the namespace bundle. Folders are never removed."""
    namespace = parse_namespace(object_name)
    if namespace is None:
        logger.debug("Ignoring delete outside videos/", extra={"object_name": object_name})
        return

    clinic, department, _ = namespace

    logger.info(
        f"[DELETE] {object_name} -> cleaning bundle for {clinic}/{department}",
        extra={"object_name": object_name, "clinic": clinic, "department": department}
    )
    try:
        await builder.build(clinic, department)
        logger.info(f"[DELETE] Bundle cleaned for {clinic}/{department}")
    except Exception:
        logger.error("[DELETE] Error cleaning bundle", exc_info=True)


async def dispatch_storage_event(
    event: dict[str, Any],
    builder: BundleBuilder,
    initializer: LanguageFolderInitializer,
    languages: Optional[Sequence[str]] = None,
) -> dict[str, int]:
    """
    Route every record of an S3 event notification.

    Keys arrive URL-encoded. Records that are neither creations nor
    removals, that are not S3 shaped, or that carry no key, are counted
    as ignored.
    """
    processed = 0
    ignored = 0

    records = event.get("Records") if isinstance(event, dict) else None
    if not isinstance(records, list):
        records = []

    for record in records:
        key = _record_key(record)
        if key is None:
            ignored += 1
            continue

        event_name = record.get("eventName") or ""
        if not isinstance(event_name, str):
            event_name = ""
        object_name = urllib.parse.unquote_plus(key)
        if event_name.startswith(CREATED_EVENT_PREFIX):
            await handle_object_created(object_name, builder, initializer, languages)
            processed += 1
        elif event_name.startswith(REMOVED_EVENT_PREFIX):
            await handle_object_deleted(object_name, builder)
            processed += 1
        else:
            logger.debug(
                "Ignoring storage event",
                extra={"event_name": event_name, "object_name": object_name}
            )
            ignored += 1

    return {"processed": processed, "ignored": ignored}


def _record_key(record: Any) -> Optional[str]:
    """The object key of a record, or None if the record isn't S3 shaped."""
    if not isinstance(record, dict):
        return None
    s3 = record.get("s3")
    if not isinstance(s3, dict):
        return None
    obj = s3.get("object")
    if not isinstance(obj, dict):
        return None
    key = obj.get("key")
    if not isinstance(key, str) or not key:
        return None
    return key
