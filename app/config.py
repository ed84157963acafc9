"""
Application configuration management
"""

from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Application
    APP_NAME: str = "Conference Registration"
    APP_VERSION: str = "1.0.0"
    APP_ENV: str = "development"
    DEBUG: bool = False
    API_PREFIX: str = "/api/v1"

    # Event shown on tickets
    EVENT_NAME: str = "AI ITRI NTIC EVENT 2026"
    EVENT_LOCATION: str = "Tanger, Morocco"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # Database
    DATABASE_URL: str  # Must be provided via environment

    @field_validator('DATABASE_URL')
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        if v.startswith('postgresql://'):
            v = v.replace('postgresql://', 'postgresql+asyncpg://', 1)
        elif v.startswith('sqlite://'):
            v = v.replace('sqlite://', 'sqlite+aiosqlite://', 1)
        return v
    DB_POOL_SIZE: int = 20
    DB_MAX_OVERFLOW: int = 40
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 3600
    DB_ECHO: bool = False
    SQLITE_BUSY_TIMEOUT: int = 30

    # Admin access
    ADMIN_API_TOKEN: str  # Must be provided via environment

    @field_validator('ADMIN_API_TOKEN')
    @classmethod
    def validate_admin_token(cls, v: str) -> str:
        if len(v) < 32:
            raise ValueError("ADMIN_API_TOKEN must be at least 32 characters long")
        return v

    # Redis
    REDIS_URL: str = "redis://localhost:6379/0"
    REDIS_MAX_CONNECTIONS: int = 50

    # Rate Limiting
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_RESERVATIONS_PER_MINUTE: int = 10
    RATE_LIMIT_SCANS_PER_MINUTE: int = 120

    # CORS
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:5173"]

    # Monitoring
    PROMETHEUS_ENABLED: bool = True
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "json"
    LOG_FILE: Optional[str] = None

    # Reservations
    MAX_SEATS_PER_RESERVATION: int = 10
    TICKET_CODE_LENGTH: int = 10
    TICKET_CODE_MAX_ATTEMPTS: int = 5
    SEED_SEATS_ON_STARTUP: bool = True

    @field_validator('TICKET_CODE_LENGTH')
    @classmethod
    def validate_ticket_code_length(cls, v: int) -> int:
        if v < 8:
            raise ValueError("TICKET_CODE_LENGTH must be at least 8")
        return v

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",")]
        return v

    @property
    def is_production(self) -> bool:
        return self.APP_ENV == "production"

    @property
    def is_development(self) -> bool:
        return self.APP_ENV == "development"

    @property
    def is_testing(self) -> bool:
        return self.APP_ENV == "testing"

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")


# Create global settings instance
settings = Settings()
