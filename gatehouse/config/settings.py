"""
Environment configuration for the gatehouse service.
Uses Pydantic's settings management to handle environment variables
with proper type validation and default values.
"""

import json
from functools import lru_cache
from pathlib import Path
from typing import List, Optional, Union

from dotenv import load_dotenv
from pydantic import Field, ValidationInfo, field_validator
from pydantic_settings import BaseSettings

# Load environment variables from .env file if it exists
env_path = Path('.') / '.env'
load_dotenv(dotenv_path=env_path)


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    @staticmethod
    def get_secret_key_default() -> str:
        """Generate a default secret key if not provided"""
        import secrets
        import string
        alphabet = string.ascii_letters + string.digits
        return ''.join(secrets.choice(alphabet) for _ in range(32))

    # Application configuration
    APP_NAME: str = Field(default="Gatehouse Visitor Access", alias="PROJECT_NAME")
    API_VERSION: str = Field(default="v1", alias="PROJECT_VERSION")
    API_V1_STR: str = "/api/v1"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"
    CORS_ORIGINS: List[str] = Field(default=["*"], alias="BACKEND_CORS_ORIGINS")

    # Database configuration - support both individual fields and DATABASE_URL
    DATABASE_URL: Optional[str] = None
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_USER: str = "postgres"
    DB_PASSWORD: str = "postgres"
    DB_NAME: str = "gatehouse"
    DB_POOL_SIZE: int = 20
    DB_POOL_OVERFLOW: int = 10

    # Security configuration
    JWT_SECRET_KEY: str = Field(default_factory=lambda: Settings.get_secret_key_default())
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # Email configuration
    SMTP_HOST: Optional[str] = None
    SMTP_PORT: int = 587
    SMTP_USER: Optional[str] = Field(default=None, alias="SMTP_USERNAME")
    SMTP_PASSWORD: Optional[str] = None
    SMTP_TLS: bool = True
    SMTP_TIMEOUT_SECONDS: int = 30
    EMAIL_FROM_NAME: str = "Gatehouse"
    EMAIL_FROM_ADDRESS: Optional[str] = Field(default=None, alias="FROM_EMAIL")

    # Visitor pass rendering
    PASS_BASE_URL: str = "http://localhost:8000"
    PASS_IMAGE_SIZE: int = 300
    PASS_IMAGE_BORDER: int = 2
    PASS_CONTENT_ID_DOMAIN: str = "gatehouse"

    # Push notifications (Expo)
    EXPO_PUSH_URL: str = "https://exp.host/--/api/v2/push/send"
    EXPO_ACCESS_TOKEN: Optional[str] = None
    PUSH_BATCH_LIMIT: int = 100
    PUSH_TIMEOUT_SECONDS: float = 10.0

    # Booking reminder trigger. The window assumes the trigger fires exactly
    # once per minute; successive windows must not overlap.
    CRON_SECRET: Optional[str] = None
    REMINDER_WINDOW_START_MINUTES: int = 9
    REMINDER_WINDOW_END_MINUTES: int = 10

    # Monitoring and logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "text"
    ENABLE_STRUCTURED_LOGGING: bool = True

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": True,
        "populate_by_name": True,
        "extra": "ignore",
    }

    # Validators
    @field_validator('CORS_ORIGINS', mode='before')
    @classmethod
    def parse_cors_origins(cls, v: Union[str, List[str]]) -> List[str]:
        """Parse CORS_ORIGINS from string to list"""
        if isinstance(v, str):
            # Handle JSON string format from .env
            if v.startswith('[') and v.endswith(']'):
                try:
                    return json.loads(v)
                except json.JSONDecodeError:
                    pass
            return [origin.strip() for origin in v.split(",")]
        return v

    @field_validator('LOG_LEVEL')
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.upper()

    @field_validator('REMINDER_WINDOW_END_MINUTES')
    @classmethod
    def validate_reminder_window(cls, v: int, info: ValidationInfo) -> int:
        """The lookahead window must have a positive width"""
        start = info.data.get('REMINDER_WINDOW_START_MINUTES')
        if start is not None and v <= start:
            raise ValueError("REMINDER_WINDOW_END_MINUTES must be greater than REMINDER_WINDOW_START_MINUTES")
        return v

    def get_database_url(self) -> str:
        """Construct database URL from components or use provided URL"""
        if self.DATABASE_URL:
            return self.DATABASE_URL

        return f"postgresql://{self.DB_USER}:{self.DB_PASSWORD}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"

    def is_sqlite(self) -> bool:
        return self.get_database_url().startswith("sqlite")

    def is_production(self) -> bool:
        """Check if running in production environment"""
        return self.ENVIRONMENT == "production"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
