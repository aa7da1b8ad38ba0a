"""Application configuration models."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, HttpUrl, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables or a .env file."""

    app_name: str = Field(default="Movie Night", alias="APP_NAME")
    server_host: str = Field(default="0.0.0.0", alias="HOST")
    server_port: int = Field(default=3000, alias="PORT")

    tmdb_api_key: str | None = Field(default=None, alias="TMDB_API_KEY")
    watchmode_api_key: str | None = Field(default=None, alias="WATCHMODE_API_KEY")

    tmdb_api_url: HttpUrl = Field(
        default="https://api.themoviedb.org/3", alias="TMDB_API_URL"
    )
    watchmode_api_url: HttpUrl = Field(
        default="https://api.watchmode.com/v1", alias="WATCHMODE_API_URL"
    )

    database_url: str = Field(
        default="sqlite+aiosqlite:///./movienight.db", alias="DATABASE_URL"
    )

    room_code_attempts: int = Field(
        default=5, alias="ROOM_CODE_ATTEMPTS", ge=1, le=20
    )

    environment: Literal["development", "production"] = Field(
        default="development", alias="ENVIRONMENT"
    )

    @field_validator("tmdb_api_key", "watchmode_api_key", mode="before")
    @classmethod
    def _blank_keys_are_unset(cls, value: object) -> object:
        """Treat empty or whitespace-only provider keys as missing."""

        if isinstance(value, str):
            value = value.strip()
            return value or None
        return value

    @property
    def tmdb_enabled(self) -> bool:
        return bool(self.tmdb_api_key)

    @property
    def watchmode_enabled(self) -> bool:
        return bool(self.watchmode_api_key)

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")


@lru_cache
def get_settings() -> Settings:
    """Return a cached settings instance."""

    return Settings()  # type: ignore[call-arg]


settings = get_settings()
