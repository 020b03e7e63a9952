import os
from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = os.getenv("ENV", "development")
    DEBUG: bool = ENV == "development"
    LOG_LEVEL: str = "info"

    # Database settings
    DATABASE_URL: str = "sqlite:///./flightgo.db"
    DATABASE_ECHO: bool = False

    # Store circuit breaker
    DB_FAILURE_THRESHOLD: int = 3
    DB_RECOVERY_TIMEOUT: int = 30

    # HTTP settings
    HOST: str = "0.0.0.0"
    PORT: int = 6001
    CORS_ORIGINS: List[str] = ["*"]

    # Accounts
    BCRYPT_ROUNDS: int = 10
    DEFAULT_ADMIN_EMAIL: str = "admin@flightgo.com"
    DEFAULT_ADMIN_PASSWORD: str = "admin123"
    DEFAULT_ADMIN_NAME: str = "Administrator"

    # Booking policy
    ENFORCE_SEAT_CAPACITY: bool = True


@lru_cache()
def get_settings() -> Settings:
    return Settings()
