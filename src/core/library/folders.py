"""
Language folder provisioning.

Object storage has no real folders, so an empty language folder is made
visible with a zero-byte marker object. Languages that already hold any
object are left alone, which makes provisioning safe to re-run.
"""

import logging
from datetime import datetime, timezone
from typing import Optional, Sequence

from ...infrastructure.storage.client import StorageClient
from .models import DEFAULT_LANGUAGES
from .paths import language_prefix, placeholder_path

logger = logging.getLogger(__name__)

PLACEHOLDER_CONTENT_TYPE = "text/plain"
PLACEHOLDER_PURPOSE = "language-folder-structure"


class LanguageFolderInitializer:
    """Creates marker objects for the languages a video is missing."""

    def __init__(
        self,
        storage: StorageClient,
        default_languages: Sequence[str] = DEFAULT_LANGUAGES,
    ) -> None:
        self._storage = storage
        self._default_languages = tuple(default_languages)

    @property
    def default_languages(self) -> tuple[str, ...]:
        return self._default_languages

    async def ensure_language_folders(
        self,
        clinic: str,
        department: str,
        video_name: str,
        languages: Optional[Sequence[str]] = None,
    ) -> None:
        """
        Provision every missing language folder of a video.

        A blank video name is a no-op. The first storage failure aborts
        the loop and is re-raised; folders created before it stay.
        """
        name = (video_name or "").strip()
        if not name:
            logger.warning(
                "Empty video name, skipping language folder setup",
                extra={"clinic": clinic, "department": department}
            )
            return

        if languages is None:
            languages = self._default_languages

        logger.info(
            "Setting up language folders",
            extra={"clinic": clinic, "department": department, "video": name}
        )

        created: list[str] = []
        try:
            for lang in languages:
                prefix = language_prefix(clinic, department, name, lang)
                if await self._storage.exists(prefix):
                    continue

                await self._storage.write_object(
                    placeholder_path(clinic, department, name, lang),
                    b"",
                    PLACEHOLDER_CONTENT_TYPE,
                    metadata={
                        "purpose": PLACEHOLDER_PURPOSE,
                        "video-name": name,
                        "language": lang,
                        "created-at": datetime.now(timezone.utc).isoformat(),
                    },
                )
                created.append(lang)
                logger.info("Created language folder", extra={"prefix": prefix})

        except Exception as e:
            logger.error(
                "Failed to create language folders",
                extra={"video": name, "created_languages": created, "error": str(e)}
            )
            raise

        if created:
            logger.info(
                f"Created {len(created)} language folders for {name}: {', '.join(created)}",
                extra={"video": name, "languages": created}
            )
        else:
            logger.info(
                "All language folders already exist",
                extra={"video": name}
            )
