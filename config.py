"""
Configuration management for MedsBuddy
"""

from typing import Optional
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Application
    APP_NAME: str = "MedsBuddy"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENV: str = "development"

    # API
    API_PREFIX: str = "/api/v1"
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # Database
    DATABASE_URL: str = "sqlite:///./medsbuddy.db"
    DATABASE_ECHO: bool = False

    # Scheduled job trigger (Authorization: Bearer <CRON_SECRET>)
    CRON_SECRET: Optional[str] = None

    # Mail (SMTP). Emails are only logged when MAIL_HOST is unset.
    MAIL_HOST: Optional[str] = None
    MAIL_PORT: int = 587
    MAIL_USER: Optional[str] = None
    MAIL_PASSWORD: Optional[str] = None
    MAIL_USE_TLS: bool = True  # STARTTLS
    MAIL_FROM_NAME: str = "MedsBuddy"
    MAIL_TIMEOUT_SECONDS: int = 30

    # Clock used for dose windows; server local time when unset
    APP_TIMEZONE: Optional[str] = None

    # CORS
    CORS_ORIGINS: list[str] = ["http://localhost:3000", "http://localhost:5173"]

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


class AdherenceConfig:
    """Limits shared by validation and the missed-dose job"""

    NOTIFICATION_WINDOW_MIN: int = 15
    NOTIFICATION_WINDOW_MAX: int = 480  # 8 hours
    NOTIFICATION_WINDOW_DEFAULT: int = 60

    MEDICATION_NAME_MAX_LENGTH: int = 100
    MEDICATION_DOSAGE_MAX_LENGTH: int = 50
    MEDICATION_NOTES_MAX_LENGTH: int = 500

    # 24-hour clock, hour may omit the leading zero
    SCHEDULED_TIME_PATTERN: str = r"^([01]?\d|2[0-3]):[0-5]\d$"


# Database table names
class TableNames:
    PROFILES = "profiles"
    MEDICATIONS = "medications"
    MEDICATION_LOGS = "medication_logs"


settings = get_settings()
adherence_config = AdherenceConfig()
