# fleet_portal/config.py
"""
Application configuration using Pydantic-Settings.
All settings can be overridden via environment variables or .env file.
"""

from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    # ── Database ──────────────────────────────────────────────────────────
    DATABASE_URL: str = "sqlite:///./fleet_portal.db"
    DB_STATEMENT_TIMEOUT_SECONDS: int = 10     # Connect/busy timeout handed to the driver

    # ── Network ───────────────────────────────────────────────────────────
    BACKEND_HOST: str = "0.0.0.0"
    BACKEND_PORT: int = 8080
    CORS_ORIGINS: list[str] = ["*"]            # Restrict to the portal origin in production

    # ── Security ──────────────────────────────────────────────────────────
    API_KEY: Optional[str] = None   # Set in .env to enable auth on API endpoints

    # ── Search ────────────────────────────────────────────────────────────
    SEARCH_MIN_TERM_LENGTH: int = 2
    SEARCH_RESULT_LIMIT: int = 10

    # ── Notifications ─────────────────────────────────────────────────────
    NOTIFY_WEBHOOK_URL: Optional[str] = None   # POST target for notify(); logging only when empty
    NOTIFY_TIMEOUT_SECONDS: float = 5.0

    # ── Logging ───────────────────────────────────────────────────────────
    LOG_LEVEL: str = "INFO"
    LOG_DIR: Optional[str] = None              # Defaults to <repo>/logs
    LOG_TO_FILE: bool = True                   # Console only when False
    LOG_MAX_BYTES: int = 5 * 1024 * 1024
    LOG_BACKUP_COUNT: int = 10

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
