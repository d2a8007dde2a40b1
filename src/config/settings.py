"""
Application configuration using Pydantic settings.

Configuration is loaded from environment variables with sensible defaults.
Using Pydantic's BaseSettings means we get:
- Type validation at startup (fail fast if config is wrong)
- Documentation of what's required vs optional
- Easy testing with different configurations

Mock mode enables local development without object storage.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..core.library.models import DEFAULT_LANGUAGES


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables.
    For lists (like supported_languages), use comma-separated values in env.
    """

    # API Configuration
    api_title: str = "Video Library Bundle API"
    api_version: str = "v1"

    # Storage Configuration
    storage_bucket: str = Field(
        default="polydoc-lib",
        description="Bucket holding videos/ assets and bundles/ snapshots"
    )
    storage_region: str = Field(
        default="europe-west1",
        description="Region passed to the S3 client. R2 accepts 'auto'."
    )
    storage_endpoint_url: Optional[str] = Field(
        default=None,
        description="Custom S3-compatible endpoint (R2, MinIO, GCS interoperability). None means AWS S3."
    )
    storage_access_key_id: str = Field(
        default="",
        description="Access key ID. Empty uses the default boto3 credential chain."
    )
    storage_secret_access_key: str = Field(
        default="",
        description="Secret access key"
    )
    storage_mock_mode: bool = Field(
        default=False,
        description="Use in-memory mock instead of real object storage."
    )

    # Library Behavior
    supported_languages: str = Field(
        default=",".join(DEFAULT_LANGUAGES),
        description="Comma-separated ISO 639-1 codes provisioned for every new video."
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    # CORS
    cors_origins: str = Field(
        default="*",
        description="Comma-separated list of allowed CORS origins."
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    @property
    def supported_languages_list(self) -> list[str]:
        """Parse comma-separated language codes into a list, keeping order."""
        return [lang.strip() for lang in self.supported_languages.split(",") if lang.strip()]

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse comma-separated CORS origins into a list."""
        if self.cors_origins == "*":
            return ["*"]
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    def validate_required_fields(self) -> list[str]:
        """
        Validate that required fields are set based on mock mode settings.

        Returns list of missing required fields.
        """
        missing = []

        if not self.supported_languages_list:
            missing.append("SUPPORTED_LANGUAGES")

        if not self.storage_mock_mode:
            if not self.storage_bucket:
                missing.append("STORAGE_BUCKET")
            # Keys come as a pair or not at all
            if bool(self.storage_access_key_id) != bool(self.storage_secret_access_key):
                missing.append("STORAGE_ACCESS_KEY_ID and STORAGE_SECRET_ACCESS_KEY")

        return missing


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Settings are loaded once per process. For tests, call
    get_settings.cache_clear() to reset.
    """
    return Settings()
