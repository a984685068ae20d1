"""Application configuration."""

import os
from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

from photo_album.adapters.json_photo_catalog import DEFAULT_PHOTOS_FILE

_ENVIRONMENT = os.getenv("ENVIRONMENT", "development")

Environment = Literal["development", "production", "test"]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    environment: Environment = _ENVIRONMENT  # type: ignore[assignment]
    host: str = "0.0.0.0"  # noqa: S104
    port: int = 3000
    photos_file: Path = DEFAULT_PHOTOS_FILE

    api_base_url: str = "http://localhost:3000"
    page_size: int = 12
    use_infinite_scroll: bool = True
    cache_ttl_seconds: float = 300
    cache_file: Path = Path(".photo_album_cache.json")
    request_timeout_seconds: float = 10

    model_config = SettingsConfigDict(
        env_prefix="PHOTO_ALBUM_",
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @property
    def is_development(self) -> bool:
        """Whether error details may be exposed to clients."""
        return self.environment == "development"
