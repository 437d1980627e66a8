"""Application configuration from environment variables."""
from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "Task Manager PWA"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    API_PREFIX: str = "/api"

    # Client-side local store
    LOCAL_DATABASE_URL: str = "sqlite+aiosqlite:///./taskpwa_local.db"
    DATABASE_ECHO: bool = False

    # Remote server used by the sync client
    SERVER_BASE_URL: str = "http://localhost:3000"
    HTTP_TIMEOUT_SECONDS: float = 30.0

    # Sync retry policy (applies to whole reconcile runs)
    SYNC_RETRY_ATTEMPTS: int = 3
    SYNC_RETRY_MIN_SECONDS: float = 2.0
    SYNC_RETRY_MAX_SECONDS: float = 10.0

    # Server demo data
    SEED_DEMO_TASKS: bool = False

    # Push (VAPID)
    VAPID_PUBLIC: Optional[str] = None
    VAPID_PRIVATE: Optional[str] = None

    # CORS
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:8080"]

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "text"  # json or text

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
