"""
Library Configuration

Uses pydantic-settings for environment variable loading with validation.
Process-wide defaults (HTTP timeouts, default retry policies) live here;
per-integration configuration lives in the contract models.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Library settings loaded from environment variables.

    Environment variables can be set directly or via .env file, using the
    HOOKBRIDGE_ prefix (e.g. HOOKBRIDGE_HTTP_TIMEOUT_SECONDS=5).
    """

    model_config = SettingsConfigDict(
        env_prefix="HOOKBRIDGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==========================================================================
    # Environment
    # ==========================================================================
    environment: Literal["development", "testing", "production"] = Field(
        default="development",
        description="Runtime environment"
    )

    log_level: str = Field(
        default="INFO",
        description="Log level used by configure_logging()"
    )

    # ==========================================================================
    # Outbound HTTP (OAuth providers)
    # ==========================================================================
    http_timeout_seconds: float = Field(
        default=10.0,
        description="Timeout for OAuth provider HTTP calls"
    )

    user_agent: str = Field(
        default="hookbridge/1.0",
        description="User-Agent header sent to providers"
    )

    # ==========================================================================
    # Webhook retry policy defaults
    # ==========================================================================
    webhook_max_retries: int = Field(
        default=3,
        description="Retry attempts allowed after the first processing attempt"
    )
    webhook_base_delay_ms: int = Field(
        default=1000,
        description="Base backoff delay for webhook retries (milliseconds)"
    )
    webhook_max_delay_ms: int = Field(
        default=60000,
        description="Backoff cap for webhook retries (milliseconds)"
    )

    # ==========================================================================
    # Generic API client defaults
    # ==========================================================================
    api_max_retries: int = Field(
        default=3,
        description="Retry attempts for retryable API client failures"
    )
    api_base_delay_ms: int = Field(
        default=1000,
        description="Base backoff delay for API client retries (milliseconds)"
    )
    api_max_delay_ms: int = Field(
        default=30000,
        description="Backoff cap for API client retries (milliseconds)"
    )
    api_timeout_ms: int = Field(
        default=10000,
        description="Default API client request timeout (milliseconds)"
    )


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Call get_settings.cache_clear() after changing environment variables.
    """
    return Settings()
