"""Application configuration.

Loads settings from environment variables with sensible defaults.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API
    api_version: str = "0.1.0"
    debug: bool = False

    # Database
    database_url: str = "postgresql+asyncpg://repairbeam:repairbeam_dev_password@db:5432/repairbeam"

    # Authentication
    repairbeam_api_key: str = "dev-api-key-change-in-production"

    # Generation provider
    gemini_api_key: str = ""
    gemini_model: str = "gemini-1.5-flash"
    generation_timeout_seconds: float = 60.0
    generation_batch_size: int = 5
    generation_batch_delay_seconds: float = 0.5

    # Scheduled refresh of expired lists (off by default: every run costs money)
    list_refresh_enabled: bool = False
    list_refresh_interval_hours: float = 6.0
    list_refresh_initial_delay_seconds: float = 60.0

    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    class Config:
        """Pydantic configuration."""

        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
