"""Application configuration and settings"""
from pydantic import validator
from pydantic_settings import BaseSettings
from typing import List
import secrets


class Settings(BaseSettings):
    """Application settings and configuration"""

    # API Settings
    API_PREFIX: str = "/api"
    PROJECT_NAME: str = "Resource Management API"
    VERSION: str = "1.0.0"
    DESCRIPTION: str = "CRUD management of user resources over a relational store"
    ENVIRONMENT: str = "local"

    # Server
    HOST: str = "127.0.0.1"
    PORT: int = 8000

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./resource_api.db"
    DATABASE_ECHO: bool = False

    # Security
    AUTH_ENABLED: bool = False
    SECRET_KEY: str = secrets.token_urlsafe(32)
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30

    # CORS
    BACKEND_CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:8000"]

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = "logs/app.log"

    @validator("ENVIRONMENT")
    def validate_environment(cls, v):
        environment = v.lower()
        if environment not in ("local", "test", "production"):
            raise ValueError(
                f"{v} is not a supported environment. Use either `local` or `test` or `production`."
            )
        return environment

    class Config:
        case_sensitive = True
        env_file = ".env"


settings = Settings()
