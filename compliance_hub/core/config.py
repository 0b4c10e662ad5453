# compliance_hub/core/config.py

from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Database
    database_url: str = "sqlite:///./compliance_hub.db"

    # API
    api_title: str = "Compliance Hub"
    api_version: str = "1.0.0"

    # Security
    secret_key: str = "your-secret-key-change-in-production"
    access_token_expire_minutes: int = 30
    refresh_token_expire_days: int = 30

    # CORS - React frontend origins
    cors_origins: List[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
    ]

    # Bulk import
    max_import_file_size: int = 5 * 1024 * 1024  # 5MB

    # Logging
    log_level: str = "INFO"

    # Environment
    environment: str = "development"

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
