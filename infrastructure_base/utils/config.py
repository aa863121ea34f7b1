"""
Configuration settings for the repository layer.
"""

from functools import lru_cache
from pydantic import ConfigDict
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    """Repository layer settings."""

    # Database
    DATABASE_URL: str = ""
    ENVIRONMENT: str = "development"
    TESTING: bool = False

    # Stored procedures
    PROCEDURE_SCHEMA: str = "dbo"
    COMMAND_TIMEOUT: int = 60 * 10

    # Logging
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"

    model_config = ConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="allow"
    )

@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
