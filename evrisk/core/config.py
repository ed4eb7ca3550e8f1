"""Application configuration with environment variable validation."""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve .env and the shipped data snapshot relative to the project root
# (3 levels up from this file)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"
_DEFAULT_DATA_DIR = _PROJECT_ROOT / "data_v1.0"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Reference data
    data_dir: Path = Field(default=_DEFAULT_DATA_DIR, validation_alias="EVRISK_DATA_DIR")

    # Logging
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    # API settings
    allowed_origins: list[str] | str = Field(
        default=["*"],
        validation_alias="ALLOWED_ORIGINS",
    )

    # Rate limiting (slowapi limit string)
    rate_limit: str = Field(default="30/minute", validation_alias="RATE_LIMIT")

    @property
    def cors_origins(self) -> list[str]:
        """Parse ALLOWED_ORIGINS from comma-separated string or return list."""
        if isinstance(self.allowed_origins, str):
            return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]
        return self.allowed_origins


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
