"""Application configuration."""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings

from fda_insights.constants import CACHE_TTL, DEFAULT_CACHE_DIR, DEFAULT_MAX_RETRIES, DEFAULT_TIMEOUT


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API Keys
    openfda_api_key: str = ""

    # HTTP client
    request_timeout_seconds: float = DEFAULT_TIMEOUT
    max_retries: int = DEFAULT_MAX_RETRIES

    # Response cache (off by default: every page view queries the live API)
    cache_enabled: bool = False
    cache_dir: Path = DEFAULT_CACHE_DIR
    cache_ttl_seconds: int = CACHE_TTL

    # App Settings
    debug: bool = False
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        frozen = True


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
