"""
Configuration Settings
======================

Centralized configuration using Pydantic V2 Settings.
"""

import logging

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import make_url


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    app_env: str = Field(default="development")
    app_debug: bool = Field(default=False)
    database_url: str = Field(default="sqlite:///./data/clients.db")
    db_pool_size: int = Field(default=5, ge=1)
    db_max_overflow: int = Field(default=10, ge=0)
    db_pool_pre_ping: bool = Field(default=True)
    db_sqlite_timeout: float = Field(default=5.0, gt=0.0)
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Accept only level names the logging module knows about."""
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


settings = Settings()


def print_settings(current: Settings = None) -> None:
    """Print the effective configuration with credentials masked."""
    current = current or settings
    print("=" * 60)
    print("⚙️  Settings")
    print("=" * 60)
    for name, value in current.model_dump().items():
        if name == "database_url":
            value = make_url(value).render_as_string(hide_password=True)
        print(f"  {name:<18} {value}")
    print("=" * 60)
