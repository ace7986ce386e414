"""
Configuration management using Pydantic Settings.
Hierarchical: Environment variables → .env file → Defaults
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Database connection settings."""

    url: str | None = Field(
        default=None,
        description="SQLAlchemy async URL, e.g. mysql+aiomysql://user:pw@host/db. Unset disables persistence.",
    )
    echo: bool = Field(default=False, description="Log every SQL statement")
    pool_size: int = Field(default=5, description="Connection pool size (server databases only)")
    pool_recycle_sec: int = Field(default=1800, description="Recycle pooled connections after N seconds")

    @property
    def is_sqlite(self) -> bool:
        return bool(self.url) and self.url.startswith("sqlite")

    model_config = SettingsConfigDict(env_prefix="ORPHEUS_DB_")


class AuthSettings(BaseSettings):
    """Session signing and administrator credentials."""

    jwt_secret: SecretStr = Field(
        default=SecretStr(""),
        description="HMAC secret used to sign session tokens",
    )
    admin_email: str = Field(default="", description="Email address that is granted the admin role")
    admin_password: SecretStr | None = Field(
        default=None,
        description="Admin password, plain text or a passlib hash. Unset disables password login.",
    )
    session_cookie_name: str = Field(default="app_session", description="Name of the session cookie")
    session_max_age_days: int = Field(default=365, description="Session lifetime in days")

    @field_validator("admin_email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip()

    model_config = SettingsConfigDict(env_prefix="ORPHEUS_AUTH_")


class StorageSettings(BaseSettings):
    """S3-compatible object storage settings (AWS S3, Cloudflare R2, MinIO)."""

    access_key_id: str = Field(default="", description="Access key id")
    secret_access_key: SecretStr = Field(default=SecretStr(""), description="Secret access key")
    bucket: str = Field(default="", description="Bucket that receives uploads")
    region: str = Field(default="us-east-1", description="Bucket region")
    endpoint: str | None = Field(
        default=None,
        description="Custom endpoint for S3-compatible services; enables path-style addressing",
    )
    public_url_base: str | None = Field(
        default=None,
        description="Public URL prefix for stored objects (CDN or r2.dev domain)",
    )
    max_image_mb: int = Field(default=10, description="Upper bound for image uploads")
    max_pdf_mb: int = Field(default=50, description="Upper bound for PDF uploads")

    @property
    def is_configured(self) -> bool:
        return bool(
            self.access_key_id
            and self.secret_access_key.get_secret_value()
            and self.bucket
        )

    model_config = SettingsConfigDict(env_prefix="ORPHEUS_S3_")


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["json", "console"] = "json"
    output: Literal["stdout", "file"] = "stdout"
    file_path: Path | None = Field(default=None, description="Log file path if output=file")
    rotate_mb: int = Field(default=100, description="Log rotation size (MB)")

    model_config = SettingsConfigDict(env_prefix="ORPHEUS_LOG_")


class Settings(BaseSettings):
    """Root settings object."""

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    auth: AuthSettings = Field(default_factory=AuthSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    environment: Literal["development", "test", "production"] = "development"
    debug: bool = Field(default=False, description="Debug mode")

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    model_config = SettingsConfigDict(
        env_prefix="ORPHEUS_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
    )


def validate_settings(settings: Settings) -> list[str]:
    """Return human readable configuration problems; empty when usable."""
    problems: list[str] = []
    if not settings.auth.jwt_secret.get_secret_value():
        problems.append("ORPHEUS_AUTH_JWT_SECRET is required")
    if not settings.database.url:
        problems.append("ORPHEUS_DB_URL is not set; content reads will be empty and writes will fail")
    if settings.is_production and not settings.storage.is_configured:
        problems.append("S3 credentials not set; file upload is disabled")
    return problems


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    Uses LRU cache to avoid re-reading environment on every call.
    """
    return Settings()
