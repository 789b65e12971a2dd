from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Service settings, read from ``LEAVE_DESK_*`` environment variables or ``.env``."""

    model_config = SettingsConfigDict(
        env_prefix="LEAVE_DESK_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = "Leave Desk"
    app_version: str = "0.1.0"
    debug: bool = False
    environment: Literal["development", "staging", "production"] = "development"
    # Any async SQLAlchemy URL; postgresql+asyncpg://... in production.
    database_url: str = "sqlite+aiosqlite:///./leave_desk.db"
    cors_origins: list[str] = ["http://localhost:5173", "http://localhost:8000"]
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Days granted to a new person when none is given.
    default_leave_balance: int = Field(default=6, ge=0)
    # True departs from the legacy desk, which never re-checked at approval time.
    # False restores that: approval trusts the submit-time check and may drive a balance negative.
    recheck_balance_on_approval: bool = True


_settings: Settings | None = None


def get_settings() -> Settings:
    """Return the cached settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
