"""
Video library bundle logic.

Contains the asset path grammar, the bundle builder, language folder
provisioning and storage notification handling.
"""

from .bundle import BundleBuilder, BundleNotFoundError, assemble_bundle, serialize_bundle
from .folders import LanguageFolderInitializer
from .models import (
    BUNDLE_VERSION,
    DEFAULT_LANGUAGES,
    AssetPath,
    Bundle,
    LanguageAsset,
    VideoEntry,
)
from .paths import bundle_path, parse_asset_path, parse_namespace
from .triggers import dispatch_storage_event, handle_object_created, handle_object_deleted

__all__ = [
    "BUNDLE_VERSION",
    "DEFAULT_LANGUAGES",
    "AssetPath",
    "Bundle",
    "BundleBuilder",
    "BundleNotFoundError",
    "LanguageAsset",
    "LanguageFolderInitializer",
    "VideoEntry",
    "assemble_bundle",
    "bundle_path",
    "dispatch_storage_event",
    "handle_object_created",
    "handle_object_deleted",
    "parse_asset_path",
    "parse_namespace",
    "serialize_bundle",
]
