"""Application configuration from environment variables."""

from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # App
    APP_NAME: str = "Activity Audit"
    DEBUG: bool = False
    CORS_ORIGINS: list[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
    ]

    # Database
    DATABASE_URL: str = "sqlite:///./activity_audit.db"

    # Auth
    JWT_SECRET: str = "super-secret-jwt-key-change-in-production"
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRY_MINUTES: int = 60

    # Admin Seed
    ADMIN_EMAIL: str = "ched@audit.local"
    ADMIN_PASSWORD: str = "changeme123"
    ADMIN_NAME: str = "CHED Administrator"

    # Audit trail
    AUDIT_LOG_ROUTE_NAME: str = "activity-log.index"
    AUDIT_DEFAULT_PER_PAGE: int = 25
    AUDIT_MIN_PER_PAGE: int = 5
    AUDIT_MAX_PER_PAGE: int = 100
    AUDIT_QUERY_TIMEOUT_MS: Optional[int] = 5000
    AUDIT_USER_AGENT_MAX_LENGTH: int = 500

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True


settings = Settings()
