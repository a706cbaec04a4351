"""Central configuration loaded from environment variables and ``.env``."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_STORE_NAME = ".2fauth"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="TWOFAUTH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Account store
    store_path: Path = Field(default_factory=lambda: Path.home() / DEFAULT_STORE_NAME)

    # Logging
    log_level: str = "WARNING"


settings = Settings()
