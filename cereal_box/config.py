from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import Optional


class Settings(BaseSettings):
    """Application settings."""

    # Server
    host: str = "0.0.0.0"
    port: int = 3000

    # Database
    database_url: Optional[str] = None
    connect_timeout_seconds: float = 5.0  # bounds connect + bootstrap

    # Keep serving when the database is unreachable at startup
    fail_open: bool = True

    # Application
    app_version: str = "unknown"
    log_level: str = "INFO"
    debug: bool = False

    class Config:
        env_file = ".env"
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    return Settings()
