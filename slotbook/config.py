# slotbook/config.py

import os
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Which .env file to read; override with ENV_FILE=...
env_file_path = os.getenv("ENV_FILE", ".env")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=env_file_path,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Database
    DATABASE_URL: str = "sqlite:///./slotbook.db"
    DB_ECHO: bool = False  # set to True to see SQL

    # Booking rules
    SLOT_MINUTES: int = Field(30, gt=0)
    ENFORCE_BUSINESS_HOURS: bool = True
    ALLOW_PAST_BOOKINGS: bool = False

    # Logging
    LOG_LEVEL: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()
