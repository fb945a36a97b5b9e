# Cher's Closet - Wardrobe Management Backend
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Configuration management using Pydantic Settings."""

from beartype import beartype
from pydantic import Field, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigurationError

MANAGED_REQUIRED_VARIABLES: tuple[str, ...] = (
    "DATABASE_URL",
    "PGHOST",
    "PGUSER",
    "PGDATABASE",
)


class Settings(BaseSettings):
    """Application settings with immutable configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        frozen=True,  # Immutable settings
        validate_default=True,
        extra="ignore",
    )

    # Deployment
    app_name: str = Field(
        default="Cher's Closet",
        description="Application name",
        min_length=1,
    )
    app_env: str = Field(
        default="development",
        pattern="^(development|test|production)$",
        description="Application environment",
    )
    deployment_mode: str = Field(
        default="self_hosted",
        pattern="^(self_hosted|managed)$",
        description="Self-hosted database or managed hosting platform",
    )

    # Database
    database_url: str | None = Field(
        default=None,
        description="PostgreSQL connection URL",
    )
    pghost: str | None = Field(default=None, description="Managed database host")
    pguser: str | None = Field(default=None, description="Managed database user")
    pgdatabase: str | None = Field(default=None, description="Managed database name")
    db_pool_size: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Maximum number of pooled connections",
    )
    db_idle_timeout: int = Field(
        default=30000,
        ge=1000,
        description="Idle connection timeout in milliseconds",
    )
    db_connection_timeout: int = Field(
        default=10000,
        ge=100,
        description="Connection acquisition timeout in milliseconds",
    )
    db_ssl: bool | None = Field(
        default=None,
        description="Force secure transport on or off (defaults by deployment mode)",
    )
    db_max_reconnect_attempts: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Reconnection attempts before giving up",
    )
    db_reconnect_interval: int = Field(
        default=5000,
        ge=0,
        description="Fixed delay between reconnection attempts in milliseconds",
    )
    health_check_retries: int = Field(
        default=3,
        ge=1,
        le=20,
        description="Connectivity probe attempts for health checks",
    )
    health_check_retry_delay: int = Field(
        default=1000,
        ge=0,
        description="Delay between connectivity probes in milliseconds",
    )

    # API Configuration
    api_host: str = Field(
        default="0.0.0.0",  # nosec B104 - Binding to all interfaces is needed for containerized deployment
        description="API host to bind to",
    )
    api_port: int = Field(
        default=5000,
        ge=1,
        le=65535,
        description="API port to bind to",
    )
    api_cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:5173"],
        description="Allowed CORS origins",
    )
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Root log level",
    )

    # Security
    session_secret: str = Field(
        default="test-session-secret-for-testing-only-never-use-in-production",
        min_length=32,
        description="Session cookie signing secret",
    )
    session_max_age: int = Field(
        default=7 * 24 * 60 * 60,
        ge=60,
        description="Session lifetime in seconds",
    )
    jwt_secret: str = Field(
        default="test-jwt-secret-for-testing-only-never-use-in-production-32-chars",
        min_length=32,
        description="Share token signing secret",
    )
    jwt_algorithm: str = Field(
        default="HS256",
        description="Share token algorithm",
    )
    share_link_expiration_days: int | None = Field(
        default=None,
        ge=1,
        description="Share link lifetime in days (no expiry when unset)",
    )

    # OpenAI (Optional)
    openai_api_key: str | None = Field(
        default=None,
        description="OpenAI API key for outfit recommendations",
    )
    openai_model: str = Field(
        default="gpt-4o",
        description="OpenAI chat model",
    )

    # Weather (Optional)
    openweather_api_key: str | None = Field(
        default=None,
        description="OpenWeatherMap API key",
    )
    weather_api_url: str = Field(
        default="https://api.openweathermap.org/data/2.5/weather",
        description="Current weather endpoint",
    )
    default_weather_location: str = Field(
        default="Los Angeles",
        min_length=1,
        description="Location used when a request names none",
    )

    @field_validator("api_cors_origins")
    @classmethod
    def validate_cors_origins(cls: type["Settings"], v: list[str]) -> list[str]:
        """Validate CORS origins are proper URLs."""
        for origin in v:
            if not origin.startswith(("http://", "https://")):
                raise ValueError(f"Invalid CORS origin: {origin}")
        return v

    @field_validator("session_secret")
    @classmethod
    def validate_session_secret(
        cls: type["Settings"], v: str, info: ValidationInfo
    ) -> str:
        """Ensure test secrets are not used in production."""
        if info.data.get("app_env") == "production" and v.startswith("test-"):
            raise ValueError(
                "Test session secret cannot be used in production. "
                "Set SESSION_SECRET environment variable."
            )
        return v

    @field_validator("jwt_secret")
    @classmethod
    def validate_jwt_secret(cls: type["Settings"], v: str, info: ValidationInfo) -> str:
        """Ensure test JWT secrets are not used in production."""
        if info.data.get("app_env") == "production" and v.startswith("test-"):
            raise ValueError(
                "Test JWT secret cannot be used in production. "
                "Set JWT_SECRET environment variable."
            )
        return v

    @property
    @beartype
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.app_env == "production"

    @property
    @beartype
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.app_env == "development"

    @property
    @beartype
    def is_managed(self) -> bool:
        """Check if the database is provisioned by a hosting platform."""
        return self.deployment_mode == "managed"

    @property
    @beartype
    def use_secure_transport(self) -> bool:
        """Resolve whether pooled connections must use TLS."""
        if self.db_ssl is not None:
            return self.db_ssl
        return self.is_managed

    @property
    @beartype
    def platform_label(self) -> str:
        """Human readable platform name for health reports."""
        return "Managed" if self.is_managed else "Self-hosted"


@beartype
def validate_database_environment(settings: Settings) -> None:
    """Fail fast when the deployment mode is missing database variables."""
    if not settings.is_managed:
        if not settings.database_url:
            raise ConfigurationError(
                "DATABASE_URL environment variable is required. "
                "Please check your .env file."
            )
        return

    present = {
        "DATABASE_URL": settings.database_url,
        "PGHOST": settings.pghost,
        "PGUSER": settings.pguser,
        "PGDATABASE": settings.pgdatabase,
    }
    missing = [name for name in MANAGED_REQUIRED_VARIABLES if not present[name]]
    if missing:
        raise ConfigurationError(
            f"Missing required database environment variables: {', '.join(missing)}. "
            "Did you forget to provision a database?",
            missing=missing,
        )


_settings: Settings | None = None


@beartype
def get_settings() -> Settings:
    """Get cached settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


@beartype
def clear_settings_cache() -> None:
    """Clear settings cache (for testing)."""
    global _settings
    _settings = None
