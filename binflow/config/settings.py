"""
BinFlow Production Tracking
Centralized Configuration Management

Pydantic settings with environment variable support, validation and type
safety. Every subsystem reads its configuration through ``get_settings()``.
"""

from functools import lru_cache
from typing import Optional, List
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """PostgreSQL Database Configuration"""

    model_config = SettingsConfigDict(env_prefix="POSTGRES_")

    host: str = Field(default="localhost", description="Database host")
    port: int = Field(default=5432, description="Database port")
    db: str = Field(default="binflow", alias="POSTGRES_DB", description="Database name")
    user: str = Field(default="binflow", description="Database user")
    password: SecretStr = Field(default="secure_password", description="Database password")
    pool_size: int = Field(default=10, description="Connection pool size")
    max_overflow: int = Field(default=5, description="Max overflow connections")
    pool_timeout: int = Field(default=30, description="Pool timeout in seconds")
    echo: bool = Field(default=False, description="Echo SQL queries")
    create_tables: bool = Field(default=False, description="Create missing tables on startup")
    url: Optional[str] = Field(default=None, alias="DATABASE_URL", description="Database URL (overrides host/port)")

    @property
    def async_url(self) -> str:
        """Async database URL - uses DATABASE_URL if set, otherwise asyncpg from host/port"""
        if self.url:
            return self.url
        return f"postgresql+asyncpg://{self.user}:{self.password.get_secret_value()}@{self.host}:{self.port}/{self.db}"

    @property
    def is_sqlite(self) -> bool:
        return self.async_url.startswith("sqlite")


class BusinessSettings(BaseSettings):
    """Shift and reporting policy"""

    model_config = SettingsConfigDict(env_prefix="")

    timezone: str = Field(
        default="Pacific/Auckland",
        alias="BUSINESS_TIMEZONE",
        description="IANA zone used to derive shift calendar dates",
    )
    shift_minutes: int = Field(
        default=480,
        alias="SHIFT_MINUTES",
        gt=0,
        description="Full-shift minute budget used by the efficiency formula",
    )
    dashboard_window_days: int = Field(
        default=7,
        alias="DASHBOARD_WINDOW_DAYS",
        ge=0,
        description="Trailing days included in dashboard metrics",
    )
    fallback_to_demo_data: bool = Field(
        default=True,
        alias="FALLBACK_TO_DEMO_DATA",
        description="Serve a demo shift report when no database is configured",
    )

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        """Reject zone names the tz database does not know"""
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone: {v}") from e
        return v


class PollingSettings(BaseSettings):
    """Client polling schedule"""

    model_config = SettingsConfigDict(env_prefix="POLL_")

    api_base_url: str = Field(default="http://localhost:8000/api/v1/", description="API base URL for the client")
    work_hours_start: int = Field(default=8, ge=0, le=23, description="First hour of work hours")
    work_hours_end: int = Field(default=18, ge=0, le=24, description="Last hour of work hours (inclusive)")
    work_hours_interval_seconds: int = Field(default=180, gt=0, description="Poll interval during work hours")
    off_hours_interval_seconds: int = Field(default=3600, gt=0, description="Poll interval outside work hours")
    request_timeout_seconds: float = Field(default=10.0, gt=0, description="HTTP request timeout")


class SecuritySettings(BaseSettings):
    """CORS Configuration"""

    model_config = SettingsConfigDict(env_prefix="")

    cors_origins: List[str] = Field(
        default=["http://localhost:5108", "https://localhost:5109", "http://localhost:3000"],
        alias="CORS_ORIGINS",
        description="Allowed CORS origins"
    )


class MonitoringSettings(BaseSettings):
    """Logging Configuration"""

    model_config = SettingsConfigDict(env_prefix="")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL", description="Logging level")
    log_format: str = Field(default="json", alias="LOG_FORMAT", description="Log format: json or text")


class Settings(BaseSettings):
    """
    Main Application Settings

    Aggregates all configuration sections and provides a single entry point
    for accessing application configuration.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="binflow", alias="APP_NAME", description="Application name")
    app_env: str = Field(default="development", alias="APP_ENV", description="Environment")
    debug: bool = Field(default=False, alias="DEBUG", description="Debug mode")

    # API Server
    api_host: str = Field(default="0.0.0.0", alias="API_HOST", description="API host")
    api_port: int = Field(default=8000, alias="API_PORT", description="API port")

    # Version
    version: str = Field(default="1.0.0", description="Application version")

    # Subsystem configurations
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    business: BusinessSettings = Field(default_factory=BusinessSettings)
    polling: PollingSettings = Field(default_factory=PollingSettings)
    security: SecuritySettings = Field(default_factory=SecuritySettings)
    monitoring: MonitoringSettings = Field(default_factory=MonitoringSettings)

    @field_validator("app_env")
    @classmethod
    def validate_env(cls, v: str) -> str:
        """Validate environment value"""
        allowed = ["development", "staging", "production", "testing"]
        if v.lower() not in allowed:
            raise ValueError(f"Environment must be one of: {allowed}")
        return v.lower()

    @property
    def is_production(self) -> bool:
        """Check if running in production"""
        return self.app_env == "production"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Uses LRU cache to ensure settings are only loaded once.

    Returns:
        Settings: Application settings instance
    """
    return Settings()
