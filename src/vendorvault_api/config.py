"""Application configuration."""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Minimum entropy for secrets (measured by character diversity)
MIN_SECRET_UNIQUE_CHARS = 16

SUPPORTED_DATABASE_SCHEMES = ("postgresql://", "postgres://", "sqlite+aiosqlite://")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "VendorVault API"
    debug: bool = False
    environment: Literal["development", "staging", "production"] = "development"
    public_base_url: str = "http://localhost:3000"

    # Database (required - no default for security)
    database_url: str = Field(
        description="PostgreSQL connection URL. Must be set via environment variable."
    )
    database_pool_size: int = 5
    database_max_overflow: int = 10
    auto_create_tables: bool = False

    # Security - JWT
    jwt_secret: str = Field(min_length=32)
    jwt_algorithm: str = "HS256"
    jwt_expiration_days: int = 7
    password_reset_expiration_minutes: int = 60

    # Auth cookie
    auth_cookie_name: str = "token"
    auth_cookie_secure: bool = True
    auth_cookie_samesite: Literal["lax", "strict", "none"] = "lax"

    # CORS settings
    cors_origins: str = "http://localhost:3000"  # Comma-separated list

    # Trusted proxies for rate limiting (comma-separated IP/CIDR ranges)
    trusted_proxies: str = ""

    # Rate limiting settings (requests per minute)
    rate_limit_enabled: bool = True
    rate_limit_default: int = 100
    rate_limit_auth_login: int = 5
    rate_limit_auth_register: int = 5
    rate_limit_sensitive: int = 10

    # File uploads
    upload_dir: Path = Path("data/uploads")
    max_upload_size_mb: int = 10
    cloudinary_cloud_name: str = ""
    cloudinary_api_key: str = ""
    cloudinary_api_secret: str = ""

    # Background jobs
    scheduler_enabled: bool = True

    @model_validator(mode="after")
    def validate_settings(self) -> "Settings":
        """Validate settings for security requirements."""
        # Security: Prevent debug mode in production
        if self.environment == "production" and self.debug:
            raise ValueError(
                "DEBUG mode cannot be enabled in production environment. "
                "This would expose API documentation and detailed error messages."
            )

        url = self.database_url
        if not url.startswith(SUPPORTED_DATABASE_SCHEMES):
            raise ValueError(
                "DATABASE_URL must be a PostgreSQL URL starting with 'postgresql://' "
                "or a 'sqlite+aiosqlite://' URL for local development"
            )

        if self.environment == "production":
            if url.startswith("sqlite"):
                raise ValueError("SQLite cannot be used in production")
            if len(set(self.jwt_secret)) < MIN_SECRET_UNIQUE_CHARS:
                raise ValueError(
                    f"JWT_SECRET must contain at least {MIN_SECRET_UNIQUE_CHARS} unique characters "
                    "for sufficient entropy. Use a cryptographically random value."
                )

        return self

    @property
    def async_database_url(self) -> str:
        """Get async database URL for SQLAlchemy.

        PostgreSQL URLs are rewritten for asyncpg, converting the sslmode
        parameter to ssl. SQLite URLs are returned unchanged.
        """
        url = self.database_url
        if url.startswith("sqlite"):
            return url
        url = url.replace("postgres://", "postgresql://", 1)
        url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
        return url.replace("sslmode=", "ssl=")

    @property
    def is_sqlite(self) -> bool:
        """Check whether the configured database is SQLite."""
        return self.database_url.startswith("sqlite")

    @property
    def cookie_secure(self) -> bool:
        """Secure cookie flag, relaxed for local development."""
        if self.environment == "development":
            return False
        return self.auth_cookie_secure

    @property
    def cloudinary_enabled(self) -> bool:
        """Check whether Cloudinary credentials are configured."""
        return bool(
            self.cloudinary_cloud_name and self.cloudinary_api_key and self.cloudinary_api_secret
        )

    @property
    def max_upload_size_bytes(self) -> int:
        """Maximum upload size in bytes."""
        return self.max_upload_size_mb * 1024 * 1024

    @property
    def cors_origins_list(self) -> list[str]:
        """Allowed CORS origins."""
        return _split_csv(self.cors_origins)

    @property
    def trusted_proxies_list(self) -> list[str]:
        """Trusted proxy addresses and CIDR ranges."""
        return _split_csv(self.trusted_proxies)


def _split_csv(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
