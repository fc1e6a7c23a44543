"""
Settings and configuration for the Events Service.
"""

from typing import Optional

from services.common.settings import (
    AliasChoices,
    BaseSettings,
    Field,
    SettingsConfigDict,
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    db_url_events: str = Field(
        default=...,
        description="Database connection string for the events service",
        validation_alias=AliasChoices("DB_URL_EVENTS"),
    )

    api_frontend_events_key: str = Field(
        default=...,  # required
        description="Frontend API key to access the events service",
        validation_alias=AliasChoices("API_FRONTEND_EVENTS_KEY"),
    )

    # Conflict detection
    day_boundary_timezone: Optional[str] = Field(
        default=None,
        description=(
            "IANA timezone used to derive day boundaries for conflict checks. "
            "Unset means the server process's local timezone."
        ),
        validation_alias=AliasChoices("EVENTS_DAY_BOUNDARY_TIMEZONE"),
    )
    conflict_max_concurrency: int = Field(
        default=8,
        description="Maximum number of users whose conflicts are fetched concurrently",
        validation_alias=AliasChoices("EVENTS_CONFLICT_MAX_CONCURRENCY"),
    )

    # Logging configuration
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)",
        validation_alias=AliasChoices("LOG_LEVEL"),
    )
    log_format: str = Field(
        default="json",
        description="Log format (json or text)",
        validation_alias=AliasChoices("LOG_FORMAT"),
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


_settings: Settings | None = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
