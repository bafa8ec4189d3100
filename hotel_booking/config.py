"""
Application settings.

Values are read from environment variables prefixed with ``HOTEL_``
(e.g. ``HOTEL_DATABASE_URL``) and from an optional ``.env`` file.
"""
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration."""

    APP_NAME: str = "Hotel Booking Backend"
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = "sqlite:///./hotel_booking.db"

    # JWT
    SECRET_KEY: str = "CHANGE_THIS_SECRET_IN_REAL_PROJECT"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7

    # Rate limiting (slowapi syntax, per client IP)
    RATE_LIMIT: str = "60/minute"
    RATE_LIMIT_ENABLED: bool = True

    # Circuit breaker around database commits
    BREAKER_FAIL_MAX: int = 3
    BREAKER_RESET_TIMEOUT: int = 60

    # Built-in admin account, created at startup when both are set
    ADMIN_USERNAME: Optional[str] = None
    ADMIN_PASSWORD: Optional[str] = None

    model_config = SettingsConfigDict(env_prefix="HOTEL_", env_file=".env", case_sensitive=True)


settings = Settings()
