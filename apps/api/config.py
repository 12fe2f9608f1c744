"""
Application configuration using Pydantic Settings.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./App_Data/loveletter.db"

    # API
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000

    # CORS
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    # Storage
    WEB_ROOT: str = "wwwroot"
    DATA_DIR: str = "App_Data"

    # Bucket list / maintenance password (blank disables the check)
    BUCKETLIST_MASTER_PASSWORD: str = "LoveLetterMaster"

    # Gallery
    LOVE_GALLERY_FAVORITE_LIMIT: int = 6

    # Thumbnails
    THUMBNAIL_MAX_EDGE: int = 512
    THUMBNAIL_QUALITY: int = 75
    THUMBNAIL_WORKER_ENABLED: bool = True
    THUMBNAIL_BACKFILL_ON_STARTUP: bool = True

    # External APIs
    OMDB_API_KEY: str = ""
    LOVE_SPOTIFY_CLIENT_ID: str = ""
    LOVE_SPOTIFY_CLIENT_SECRET: str = ""
    LOVE_SPOTIFY_PLAYLIST_ID: str = ""
    COUNTRY_CATALOG_URL: str = "https://restcountries.com/v3.1/all?fields=name,flags,cca3"
    HTTP_TIMEOUT_SECONDS: float = 15.0

    # Bootstrap
    AUTO_CREATE_DB_SCHEMA: bool = True
    SEED_FROM_CONFIG: bool = True

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")


settings = Settings()


def require_omdb_api_key() -> str:
    """Return configured OMDb API key or raise a configuration error."""
    api_key = (settings.OMDB_API_KEY or "").strip()
    if not api_key:
        raise ValueError("OMDB_API_KEY is not configured")
    return api_key


def favorite_limit() -> int:
    """Configured gallery favorite limit; non-positive values fall back to 6."""
    value = int(settings.LOVE_GALLERY_FAVORITE_LIMIT or 0)
    return value if value > 0 else 6
