"""
Storage key grammar for the video library.

Assets live at:
    videos/<clinic>/<department>/<videoId>/<langCode>/<fileName>.<ext>

Parsing is structural (split on "/") rather than regex based, so the
grammar is easy to audit and change.
"""

from typing import Optional

from .models import ASSET_EXTENSIONS, AssetPath

VIDEOS_ROOT = "videos"
BUNDLES_ROOT = "bundles"
BUNDLE_FILENAME = "bundle.json"
PLACEHOLDER_FILENAME = ".placeholder"

_ASSET_SEGMENTS = 6


def namespace_prefix(clinic: str, department: str) -> str:
    """Prefix holding every asset of a namespace."""
    return f"{VIDEOS_ROOT}/{clinic}/{department}/"


def language_prefix(clinic: str, department: str, video: str, language: str) -> str:
    """Prefix of one language folder of a video."""
    return f"{namespace_prefix(clinic, department)}{video}/{language}/"


def placeholder_path(clinic: str, department: str, video: str, language: str) -> str:
    """Marker object that makes an empty language folder visible."""
    return language_prefix(clinic, department, video, language) + PLACEHOLDER_FILENAME


def bundle_path(clinic: str, department: str) -> str:
    """Where the snapshot of a namespace is written."""
    return f"{BUNDLES_ROOT}/{clinic}/{department}/{BUNDLE_FILENAME}"


def parse_asset_path(object_name: str) -> Optional[AssetPath]:
    """
    Parse an object name against the asset grammar.

    Returns None for anything that doesn't match: wrong root, wrong
    number of segments, an empty segment, a file name without a stem
    or an extension other than mp4/vtt.
    """
    parts = object_name.split("/")
    if len(parts) != _ASSET_SEGMENTS or parts[0] != VIDEOS_ROOT:
        return None
    if not all(parts):
        return None

    _, clinic, department, video_id, language, filename = parts

    stem, dot, extension = filename.rpartition(".")
    if not dot or not stem or extension not in ASSET_EXTENSIONS:
        return None

    return AssetPath(
        object_name=object_name,
        clinic=clinic,
        department=department,
        video_id=video_id,
        language=language,
        extension=extension,
    )


def parse_namespace(object_name: str) -> Optional[tuple[str, str, Optional[str]]]:
    """
    Extract (clinic, department, video) from any object under videos/.

    The clinic and department must be followed by "/". The video is only
    reported when it too is followed by "/", i.e. the object sits inside
    a video folder; otherwise it is None.
    """
    parts = object_name.split("/")
    if len(parts) < 4 or parts[0] != VIDEOS_ROOT:
        return None

    clinic, department = parts[1], parts[2]
    if not clinic or not department:
        return None

    video: Optional[str] = None
    if len(parts) >= 5 and parts[3]:
        video = parts[3]

    return clinic, department, video
