"""Application settings and configuration.

This module defines all configuration options for the Pageant Vote service.
Settings are loaded from environment variables with sensible defaults.
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="Pageant Vote", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Database configuration
    database_url: str = Field(default="sqlite:///./pageant_vote.db", alias="DATABASE_URL")
    test_database_url: str | None = Field(default=None, alias="TEST_DATABASE_URL")
    use_testing_database: bool = Field(default=False, alias="USE_TEST_DATABASE")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")
    # Create missing tables at startup; production deployments run Alembic instead.
    auto_create_tables: bool = Field(default=True, alias="AUTO_CREATE_TABLES")

    # Shared access PINs; any device may use them, they do not identify a voter.
    user_pin: str = Field(default="12345", alias="VOTING_USER_PIN")
    admin_pin: str = Field(default="99999", alias="VOTING_ADMIN_PIN")

    # PIN verification throttling
    rate_limit_max_attempts: int = Field(default=5, alias="RATE_LIMIT_MAX_ATTEMPTS")
    rate_limit_window_seconds: int = Field(default=60, alias="RATE_LIMIT_WINDOW_SECONDS")
    rate_limit_lockout_seconds: int = Field(default=300, alias="RATE_LIMIT_LOCKOUT_SECONDS")

    # Results / candidate listing cache
    cache_max_entries: int = Field(default=5000, alias="CACHE_MAX_ENTRIES")
    cache_ttl_seconds: float = Field(default=120.0, alias="CACHE_TTL_SECONDS")
    cache_idle_seconds: float = Field(default=60.0, alias="CACHE_IDLE_SECONDS")

    # Device identity resolution
    device_id_source: Literal["ip", "cookie", "client"] = Field(
        default="ip",
        alias="DEVICE_ID_SOURCE",
    )
    device_cookie_name: str = Field(default="voting_device_id", alias="DEVICE_COOKIE_NAME")
    device_cookie_max_age: int = Field(
        default=60 * 60 * 24 * 365,
        alias="DEVICE_COOKIE_MAX_AGE",
    )
    device_cookie_secure: bool = Field(default=False, alias="DEVICE_COOKIE_SECURE")

    # CORS configuration for web frontend access
    cors_origins: list[str] = Field(
        default=["*"],
        alias="CORS_ORIGINS",
    )
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "DELETE", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(
        default=["*"],
        alias="CORS_ALLOW_HEADERS",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
    )

    @property
    def database_url_sync(self) -> str:
        """Return a sync-compatible database URL for tooling.

        Converts asyncpg URLs to psycopg for synchronous database operations
        like Alembic migrations.
        """
        url = self.effective_database_url
        if url.startswith("postgresql+asyncpg"):
            return url.replace("postgresql+asyncpg", "postgresql+psycopg", 1)
        return url

    @property
    def effective_database_url(self) -> str:
        """Return the database URL respecting testing overrides."""
        if self.use_testing_database and self.test_database_url:
            return self.test_database_url
        return self.database_url


settings = Settings()
