"""
Configuration management for the story service
"""
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Story service configuration loaded from environment variables"""

    # Server Configuration
    LOG_LEVEL: str = "INFO"
    LOG_DIR: Optional[str] = None

    # Database Configuration
    DATABASE_URL: str = "sqlite:///./story.db"

    # Session tokens
    JWT_SECRET: str = "change-this-secret-in-prod-0123456789abcdef"
    JWT_ALGORITHM: str = "HS256"
    TOKEN_EXPIRE_HOURS: int = Field(24, gt=0)

    # Password hashing (bcrypt work factor)
    BCRYPT_ROUNDS: int = Field(14, ge=10, le=31)

    # Feed
    FEED_PAGE_LIMIT: int = Field(50, ge=1, le=1000)

    # CORS Configuration
    CORS_ORIGINS: List[str] = ["*"]

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Dependency hook so tests can swap in their own settings."""
    return settings
