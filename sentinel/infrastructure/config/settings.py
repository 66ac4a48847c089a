"""Application configuration using Pydantic Settings.

Centralized configuration management following Clean Architecture principles.
All environment variables should be accessed through this module.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class FeedSettings(BaseSettings):
    """Status feed connection and polling configuration."""

    model_config = SettingsConfigDict(env_prefix="FEED_", case_sensitive=False)

    url: str = Field(
        default="http://localhost:8080/status",
        description="Event-stream endpoint of the status feed",
    )
    poll_base_url: str = Field(
        default="http://localhost:8080",
        description="Base address used for polling (proxied to the upstream service)",
    )
    poll_path: str = Field(
        default="/api/status",
        description="Path of the request/response status endpoint",
    )
    poll_interval_ms: int = Field(
        default=30000,
        gt=0,
        description="Interval between background refreshes while polling",
    )
    request_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Timeout for poll requests and stream connection setup",
    )
    fetch_retry_attempts: int = Field(
        default=3,
        ge=1,
        description="Attempts per poll on transport errors",
    )
    reconnect_attempts: int = Field(
        default=0,
        ge=0,
        description="Stream reconnection attempts before falling back to polling",
    )
    reconnect_delay_ms: int = Field(
        default=1000,
        ge=0,
        description="Delay before each stream reconnection attempt",
    )
    stream_idle_timeout_seconds: float = Field(
        default=60.0,
        gt=0,
        description=(
            "Longest silence tolerated on the event stream before it is treated "
            "as dropped (the feed emits a frame every 30 seconds)"
        ),
    )
    history_limit: int = Field(
        default=60,
        ge=1,
        description="Maximum number of most recent samples kept per site",
    )

    @property
    def poll_url(self) -> str:
        return f"{self.poll_base_url.rstrip('/')}/{self.poll_path.lstrip('/')}"


class ClassifierSettings(BaseSettings):
    """Sample classification policy."""

    model_config = SettingsConfigDict(env_prefix="CLASSIFIER_", case_sensitive=False)

    degraded_latency_threshold_ms: float = Field(
        default=1000.0,
        ge=0,
        description="Latency above which a successful sample is degraded",
    )


class ObservabilitySettings(BaseSettings):
    """Observability configuration settings (logging)."""

    model_config = SettingsConfigDict(env_prefix="SENTINEL_", case_sensitive=False)

    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    log_json_format: bool = Field(
        default=True,
        description="Enable JSON structured logging",
    )


class Settings(BaseSettings):
    """Main application settings.

    Aggregates all configuration modules and provides a single settings object.
    Load from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra environment variables
    )

    # Sub-settings
    feed: FeedSettings = Field(default_factory=FeedSettings)
    classifier: ClassifierSettings = Field(default_factory=ClassifierSettings)
    observability: ObservabilitySettings = Field(
        default_factory=ObservabilitySettings
    )


_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the cached settings instance.

    Returns:
        Settings instance loaded from environment
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
