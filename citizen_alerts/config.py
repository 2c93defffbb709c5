"""Application configuration using Pydantic settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Incident backend
    backend_base_url: str = "http://43.154.113.11:8080"
    backend_api_prefix: str = "/api"
    backend_timeout_seconds: float = 30.0
    backend_max_retries: int = 3

    # Ingestion settings
    default_is_ongoing: bool | None = True
    refresh_interval_minutes: int = 5
    strict_coordinates: bool = True  # Drop records with out-of-range lat/lng

    # Alert queries
    default_radius_km: float = 10.0

    # Chatbot
    chat_typing_delay_seconds: float = 1.5

    # API settings
    api_v1_prefix: str = "/api/v1"
    cors_origins: list[str] = ["*"]  # Restrict in production

    # Environment
    debug: bool = False


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
