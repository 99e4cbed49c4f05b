"""
Core configuration using Pydantic Settings.
Loads from environment variables.
"""

from typing import Literal
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # App
    app_name: str = Field(default="forum-queue", alias="APP_NAME")
    app_env: Literal["development", "staging", "production", "test"] = Field(
        default="development", alias="APP_ENV"
    )
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", alias="LOG_LEVEL"
    )

    # API
    api_v1_prefix: str = "/api/v1"
    allowed_origins: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:8000"],
        alias="ALLOWED_ORIGINS",
    )

    # Database
    database_url: str = Field(
        default="sqlite+aiosqlite:///./forum_queue.db", alias="DATABASE_URL"
    )
    database_pool_size: int = Field(default=20, alias="DATABASE_POOL_SIZE")
    database_max_overflow: int = Field(default=10, alias="DATABASE_MAX_OVERFLOW")
    database_echo: bool = Field(default=False, alias="DATABASE_ECHO")

    # Redis (optional, enables cross-process per-company locks)
    redis_url: str | None = Field(default=None, alias="REDIS_URL")

    # Queue engine
    queue_lock_timeout_seconds: float = Field(
        default=10.0, alias="QUEUE_LOCK_TIMEOUT_SECONDS"
    )
    queue_committee_quota: int = Field(default=3, ge=1, alias="QUEUE_COMMITTEE_QUOTA")
    queue_external_quota: int = Field(default=2, ge=1, alias="QUEUE_EXTERNAL_QUOTA")
    queue_internal_quota: int = Field(default=2, ge=1, alias="QUEUE_INTERNAL_QUOTA")
    default_interview_duration_minutes: int = Field(
        default=30, ge=1, alias="DEFAULT_INTERVIEW_DURATION_MINUTES"
    )
    notification_position_threshold: int = Field(
        default=4, ge=1, alias="NOTIFICATION_POSITION_THRESHOLD"
    )
    # Renumber the waiting set when an interview starts (off: positions are
    # only recomputed on join, complete, cancel, absent and admin override)
    queue_renumber_on_start: bool = Field(
        default=False, alias="QUEUE_RENUMBER_ON_START"
    )

    # Logging
    log_request_body: bool = Field(default=False, alias="LOG_REQUEST_BODY")
    log_response_body: bool = Field(default=False, alias="LOG_RESPONSE_BODY")
    log_max_body_size: int = Field(default=1024, alias="LOG_MAX_BODY_SIZE")
    json_logs: bool = Field(default=True, alias="JSON_LOGS")


# Global settings instance
settings = Settings()
