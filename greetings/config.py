"""
Configuration settings for the greeting store.

Uses Pydantic Settings to load environment variables for the SQLite database
location, connection behaviour, and logging. Values can also come from a local
`.env` file.
"""
from __future__ import annotations

from functools import lru_cache
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Database
    db_path: str = Field("greetings.db", alias="GREETINGS_DB_PATH")
    busy_timeout_seconds: float = Field(5.0, alias="GREETINGS_BUSY_TIMEOUT", gt=0)
    connect_attempts: int = Field(3, alias="GREETINGS_CONNECT_ATTEMPTS", ge=1)

    # Application
    app_env: str = Field("development", alias="APP_ENV")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_json: bool = Field(False, alias="LOG_JSON")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = ["Settings", "get_settings"]
