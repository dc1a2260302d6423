"""Server configuration using Pydantic Settings."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Server
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8000, description="Server port")
    debug: bool = Field(default=False, description="Debug mode")

    # Database
    database_url: str = Field(
        default="sqlite:///./dashboard.db",
        description="Database connection URL",
    )
    seed_on_startup: bool = Field(
        default=False,
        description="Load placeholder data into an empty database on startup",
    )

    # Auth
    auth_secret: str = Field(
        default="change-me-in-production",
        description="Secret used to sign session cookies",
    )
    session_max_age: int = Field(
        default=60 * 60 * 24,
        description="Session cookie lifetime in seconds",
    )
    session_https_only: bool = Field(
        default=False,
        description="Only send the session cookie over HTTPS",
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
