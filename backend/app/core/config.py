from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    # App
    APP_NAME: str = "LOCKIN"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = True

    # Database
    DATABASE_URL: str = "sqlite:///./lockin.db"

    # JWT
    SECRET_KEY: str = "change-me-in-production-super-secret-key"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30

    # CORS
    ALLOWED_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:5173"]

    # Rate limiting
    RATE_LIMIT_PER_MINUTE: int = 60

    # Scheduler (server local time)
    SCHEDULER_ENABLED: bool = True
    STREAK_SWEEP_HOUR: int = 0
    STREAK_SWEEP_MINUTE: int = 5
    METRICS_SWEEP_HOUR: int = 2
    METRICS_SWEEP_MINUTE: int = 0
    CLEANUP_HOUR: int = 3
    CLEANUP_MINUTE: int = 30
    ANALYTICS_RETENTION_DAYS: int = 90
    SWEEP_WORKERS: int = 4

    # Reactions / cache
    EVENT_WORKERS: int = 4
    PERIOD_CACHE_TTL_SECONDS: int = 300

    class Config:
        # Search .env in current dir AND backend/ dir
        env_file = (".env", "backend/.env", "../.env")
        env_file_encoding = "utf-8"
        extra = "ignore"


settings = Settings()
