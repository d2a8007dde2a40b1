"""
Domain models for the video library bundle.

A bundle is fully derived from the object listing of one namespace
(clinic + department). Nothing in here knows about storage or HTTP.
"""

from dataclasses import dataclass, field
from typing import Any

BUNDLE_VERSION = "1.0"

VIDEO_EXTENSION = "mp4"
SUBTITLE_EXTENSION = "vtt"
ASSET_EXTENSIONS = frozenset({VIDEO_EXTENSION, SUBTITLE_EXTENSION})

# ISO 639-1 codes provisioned for every new video, in order.
DEFAULT_LANGUAGES: tuple[str, ...] = (
    "ar",  # Arabic
    "zh",  # Chinese
    "cs",  # Czech
    "de",  # German
    "en",  # English
    "es",  # Spanish
    "fr",  # French
    "hr",  # Croatian
    "hu",  # Hungarian
    "it",  # Italian
    "pl",  # Polish
    "ro",  # Romanian
    "ru",  # Russian
    "sk",  # Slovak
    "tr",  # Turkish
    "uk",  # Ukrainian
)


@dataclass(frozen=True)
class AssetPath:
    """
    A parsed asset object name.

    Frozen because it is a value: two parses of the same name are equal.
    """
    object_name: str
    clinic: str
    department: str
    video_id: str
    language: str
    extension: str

    @property
    def is_video(self) -> bool:
        return self.extension == VIDEO_EXTENSION

    @property
    def is_subtitle(self) -> bool:
        return self.extension == SUBTITLE_EXTENSION


@dataclass
class LanguageAsset:
    """Storage locations of one language rendition of a video."""
    video_path: str = ""
    subtitle_path: str = ""

    def assign(self, asset: AssetPath) -> None:
        """Record an asset; a later asset of the same kind replaces an earlier one."""
        if asset.is_video:
            self.video_path = asset.object_name
        else:
            self.subtitle_path = asset.object_name

    def to_dict(self) -> dict[str, str]:
        return {
            "videoPath": self.video_path,
            "subtitlePath": self.subtitle_path,
        }


@dataclass
class VideoEntry:
    """
    One video and its language renditions.

    The title is the identifier; no other metadata source exists.
    """
    id: str
    languages: dict[str, LanguageAsset] = field(default_factory=dict)

    @property
    def title(self) -> str:
        return self.id

    def language(self, code: str) -> LanguageAsset:
        """Get the entry for a language, creating it on first use."""
        if code not in self.languages:
            self.languages[code] = LanguageAsset()
        return self.languages[code]

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "languages": {
                code: asset.to_dict() for code, asset in self.languages.items()
            },
        }


@dataclass
class Bundle:
    """The serialized index of a namespace."""
    clinic: str
    department: str
    videos: list[VideoEntry] = field(default_factory=list)
    version: str = BUNDLE_VERSION

    def to_dict(self) -> dict[str, Any]:
        # Key order is part of the snapshot format.
        return {
            "version": self.version,
            "clinic": self.clinic,
            "department": self.department,
            "videos": [video.to_dict() for video in self.videos],
        }
