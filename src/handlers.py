"""
AWS Lambda entry point for direct bucket notifications.

Configure the bucket to send ObjectCreated:* and ObjectRemoved:* events
for the videos/ prefix to this handler:

    src.handlers.lambda_handler
"""

import asyncio
import json
import logging

from .api.dependencies import build_storage_client
from .config.settings import get_settings
from .core.library.bundle import BundleBuilder
from .core.library.folders import LanguageFolderInitializer
from .core.library.triggers import dispatch_storage_event

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)


def lambda_handler(event, context):
    """
    Route every S3 record of the event.

    Handler failures are logged and suppressed inside the dispatch, so
    the invocation itself only fails on configuration errors.
    """
    logger.debug("Received event: %s", json.dumps(event))

    settings = get_settings()
    storage = build_storage_client(settings)
    builder = BundleBuilder(storage)
    initializer = LanguageFolderInitializer(
        storage,
        default_languages=settings.supported_languages_list,
    )

    counts = asyncio.run(dispatch_storage_event(event, builder, initializer))

    logger.info("Storage event handled: %s", counts)
    return counts
