"""Web-facing configuration helpers."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class WebSettings(BaseSettings):
    """API server settings sourced from env/.env."""

    title: str = Field(default="Orpheus", description="Name shown in the OpenAPI docs")
    host: str = Field(default="0.0.0.0", description="Bind address for `orpheus serve`")
    port: int = Field(default=3000, description="Bind port for `orpheus serve`")
    cors_origins: str = Field(
        default="",
        description="Allowed browser origins (comma-separated). Ignored outside production, where all are allowed.",
    )

    @property
    def cors_origin_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    model_config = SettingsConfigDict(env_prefix="ORPHEUS_WEB_", env_file=".env", env_file_encoding="utf-8")


@lru_cache()
def get_web_settings() -> WebSettings:
    """Return cached settings."""

    return WebSettings()
