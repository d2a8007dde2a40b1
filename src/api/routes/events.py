"""
Storage notification webhook.

Receives S3-style event notifications (bucket notifications forwarded
over HTTP, e.g. through SNS or an R2 event queue consumer) and routes
each record to the upload or delete handler.

Notifications are fire-and-forget: handler failures are logged and
swallowed, and the endpoint always acknowledges with 202.
"""

import logging
from typing import Any

from fastapi import APIRouter, status
from pydantic import BaseModel, Field

from ...core.library.triggers import dispatch_storage_event
from ..dependencies import BundleBuilderDep, FolderInitializerDep

logger = logging.getLogger(__name__)

router = APIRouter()


class StorageEventResponse(BaseModel):
    """How many notification records were acted on."""
    processed: int = Field(description="Records routed to a handler")
    ignored: int = Field(description="Records with no key or an unhandled event type")


@router.post(
    "/storage",
    response_model=StorageEventResponse,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Storage event notification",
    description="Accepts an S3 event notification document with one or more Records",
)
async def storage_event(
    event: dict[str, Any],
    builder: BundleBuilderDep,
    initializer: FolderInitializerDep,
) -> StorageEventResponse:
    counts = await dispatch_storage_event(event, builder, initializer)

    logger.info("Storage event handled", extra=counts)

    return StorageEventResponse(**counts)
