"""Application configuration using Pydantic Settings."""

from functools import lru_cache

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="Smart Task Organizer")
    app_env: str = Field(default="development")
    debug: bool = Field(default=False)

    # Storage
    storage_url: str = Field(
        default="sqlite:///./tasks.db",
        description="SQLAlchemy URL of the local key-value store, or memory:// for RAM only",
    )
    storage_key: str = Field(
        default="smart_task_organizer_tasks",
        description="Key under which the whole task collection is stored",
    )
    storage_quota_bytes: int = Field(
        default=0,
        ge=0,
        description="Maximum size of the stored collection in bytes (0 disables the quota)",
    )

    # Logging
    log_level: str = Field(default="INFO")
    log_json: bool = Field(
        default=False,
        description="Render logs as JSON lines instead of the console format",
    )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.app_env == "production"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_memory_storage(self) -> bool:
        """Check if the task collection lives only in process memory."""
        return self.storage_url.startswith("memory://")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
