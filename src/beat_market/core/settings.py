"""Application settings and configuration.

This module defines all configuration options for the Beat Market application.
Settings are loaded from environment variables with sensible defaults.
"""

from decimal import Decimal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="Beat Market", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")

    # Security and authentication
    secret_key: str = Field(alias="SECRET_KEY")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Database configuration
    database_url: str = Field(default="sqlite:///./beat_market.db", alias="DATABASE_URL")
    test_database_url: str | None = Field(default=None, alias="TEST_DATABASE_URL")
    use_testing_database: bool = Field(default=False, alias="USE_TEST_DATABASE")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")

    # Transient storage failures (lock contention, dropped connections)
    db_retry_attempts: int = Field(default=3, ge=1, alias="DB_RETRY_ATTEMPTS")
    db_retry_base_delay: float = Field(default=0.05, ge=0.0, alias="DB_RETRY_BASE_DELAY")

    # JWT authentication settings
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(default=60, alias="ACCESS_TOKEN_EXPIRE_MINUTES")

    # Marketplace economics
    commission_rate: Decimal = Field(default=Decimal("0.03"), ge=0, le=1, alias="COMMISSION_RATE")
    platform_username: str = Field(default="platform", alias="PLATFORM_USERNAME")
    bootstrap_platform_account: bool = Field(default=True, alias="BOOTSTRAP_PLATFORM_ACCOUNT")

    # Privileged account kept for compatibility with the mobile client.
    # Users with the is_admin flag are privileged regardless of this value.
    admin_username: str | None = Field(default="admin0", alias="ADMIN_USERNAME")

    # Popularity ranking
    popular_limit: int = Field(default=20, ge=1, alias="POPULAR_LIMIT")
    popular_include_unrated: bool = Field(default=True, alias="POPULAR_INCLUDE_UNRATED")

    # CORS configuration for the mobile client and web tooling
    cors_origins: list[str] = Field(default=["*"], alias="CORS_ORIGINS")
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(default=["*"], alias="CORS_ALLOW_HEADERS")

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def database_url_sync(self) -> str:
        """Return a sync-compatible database URL for tooling.

        Converts asyncpg URLs to psycopg for synchronous operations such as
        Alembic migrations.
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


settings = Settings()  # type: ignore[call-arg]
