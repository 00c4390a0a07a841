"""Application settings via pydantic-settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Progress engine configuration loaded from environment variables with CQ_ prefix."""

    model_config = SettingsConfigDict(
        env_prefix="CQ_",
        env_file=".env",
        case_sensitive=False,
    )

    # --- Core ---
    app_version: str = "0.1.0"
    environment: str = "development"
    log_level: str = "INFO"
    log_format: str = "json"

    # --- Profile Store ---
    redis_url: str = "redis://localhost:6379/0"
    redis_max_connections: int = 20
    profile_key_prefix: str = "profile:"
    commit_retries: int = 3

    # --- Notifications ---
    publish_notifications: bool = True
    notification_channel_prefix: str = "pubsub:"

    # --- Streaks ---
    default_streak_goal: int = 7


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
