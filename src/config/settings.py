"""Application settings using Pydantic BaseSettings."""

import logging
from functools import lru_cache

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "ProgramMatrix Insights"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        upper = v.upper()
        if upper not in _VALID_LOG_LEVELS:
            raise ValueError(f"log_level must be one of {_VALID_LOG_LEVELS}, got '{v}'")
        return upper

    @model_validator(mode="after")
    def validate_delays_non_negative(self) -> "Settings":
        for field_name in (
            "widget_fetch_delay",
            "widget_update_delay",
            "report_generation_delay",
            "document_fetch_delay",
            "document_upload_delay",
            "insights_fetch_delay",
            "report_action_delay",
            "config_debounce_seconds",
        ):
            value = getattr(self, field_name)
            if value < 0:
                raise ValueError(f"{field_name} must not be negative, got {value}")
        return self

    @model_validator(mode="after")
    def validate_report_shape(self) -> "Settings":
        if self.time_series_points < 1:
            raise ValueError(f"time_series_points must be at least 1, got {self.time_series_points}")
        if self.notification_duration <= 0:
            raise ValueError(
                f"notification_duration must be positive, got {self.notification_duration}"
            )
        if self.report_retry_attempts < 1:
            raise ValueError(
                f"report_retry_attempts must be at least 1, got {self.report_retry_attempts}"
            )
        return self

    @model_validator(mode="after")
    def warn_wildcard_origins(self) -> "Settings":
        if self.allowed_origins == ["*"]:
            logging.getLogger(__name__).warning(
                "allowed_origins is set to ['*']; consider restricting in production"
            )
        return self

    # CORS
    allowed_origins: list[str] = ["*"]

    # Simulated backend latency (seconds)
    widget_fetch_delay: float = 0.5
    widget_update_delay: float = 0.5
    report_generation_delay: float = 1.5
    document_fetch_delay: float = 0.5
    document_upload_delay: float = 1.0
    insights_fetch_delay: float = 0.7
    report_action_delay: float = 1.0

    # Reports
    time_series_points: int = 12
    config_debounce_seconds: float = 0.3
    random_seed: int | None = None
    report_retry_attempts: int = 1
    retry_initial_delay: float = 0.5
    retry_backoff_factor: float = 2.0

    # Notifications
    notification_duration: float = 5.0


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
