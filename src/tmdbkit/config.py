"""Configuration management using pydantic-settings.

Environment variables use the ``TMDB_`` prefix and may also come from a
``.env`` file. Sensitive data (API key, session id) are stored as SecretStr
to prevent accidental logging.
"""

from functools import lru_cache

import httpx
from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Request timeout in seconds applied when none is configured
DEFAULT_TIMEOUT = 10.0


class TransportConfig(BaseModel):
    """Settings for the underlying HTTP transport.

    Replaced wholesale by ``set_transport_config``; no validation beyond types.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    # Per-send timeout in seconds. None means DEFAULT_TIMEOUT.
    timeout: float | None = None
    headers: dict[str, str] = Field(default_factory=dict)
    # Custom httpx transport (proxies, mocks, retries at the socket level).
    # Owned by the caller: the client never closes it.
    transport: httpx.AsyncBaseTransport | None = None
    # Overall deadline for a call including retry sleeps.
    # Only honoured when context propagation is enabled.
    call_deadline: float | None = None


class Settings(BaseSettings):
    """Client settings loaded from environment variables.

    Nothing is required here: the API key is validated when a client is
    constructed from these settings.
    """

    model_config = SettingsConfigDict(
        env_prefix="TMDB_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_parse_none_str="none",
    )

    api_key: SecretStr | None = Field(
        default=None,
        description="The Movie Database API key",
    )

    session_id: SecretStr | None = Field(
        default=None,
        description="Session id used for account and rating calls",
    )

    auto_retry: bool = Field(
        default=False,
        description="Retry automatically on 202/429 responses",
    )

    with_context: bool = Field(
        default=False,
        description="Run each call in a request-scoped context",
    )

    timeout: float | None = Field(
        default=None,
        description="Per-request timeout in seconds",
        gt=0,
    )

    call_deadline: float | None = Field(
        default=None,
        description="Overall deadline for a call including retries, in seconds",
        gt=0,
    )

    max_retry_attempts: int | None = Field(
        default=10,
        description="Maximum retries per call ('none' for unbounded)",
        ge=0,
    )

    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    environment: str = Field(
        default="production",
        description="Environment name (development, production)",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is one of the standard levels."""
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in allowed:
            raise ValueError(f"log_level must be one of {allowed}")
        return v_upper

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment is development or production."""
        allowed = {"development", "production"}
        v_lower = v.lower()
        if v_lower not in allowed:
            raise ValueError(f"environment must be one of {allowed}")
        return v_lower

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == "production"

    def transport_config(self) -> TransportConfig:
        """Build the transport settings described by this configuration."""
        return TransportConfig(timeout=self.timeout, call_deadline=self.call_deadline)

    def get_safe_dict(self) -> dict[str, str | int | float | bool | None]:
        """Get configuration as dict with sensitive values masked.

        Returns:
            Dictionary with SecretStr values shown as '***'
        """
        result = {}
        for field_name in type(self).model_fields:
            value = getattr(self, field_name)

            if isinstance(value, SecretStr):
                result[field_name] = "***"
            else:
                result[field_name] = value

        return result


@lru_cache
def get_settings() -> Settings:
    """Load settings from the environment on first use."""
    return Settings()
