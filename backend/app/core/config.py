"""
Configuration settings for the Kanban Projects API
"""
from typing import List, Union
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator


class Settings(BaseSettings):
    """Application settings"""

    # Project Info
    PROJECT_NAME: str = "Kanban Projects API"
    VERSION: str = "1.0.0"
    APP_ENV: str = Field(default="development")
    DEBUG: bool = Field(default=True)

    # API Settings
    API_V1_PREFIX: str = "/api/v1"

    # CORS
    CORS_ORIGINS: Union[str, List[str]] = Field(
        default="http://localhost:3000,http://localhost"
    )

    @field_validator('CORS_ORIGINS', mode='before')
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS origins from string or list"""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        elif isinstance(v, list):
            return v
        return ["http://localhost:3000", "http://localhost"]

    ALLOWED_HOSTS: Union[str, List[str]] = Field(
        default="localhost,127.0.0.1"
    )

    @field_validator('ALLOWED_HOSTS', mode='before')
    @classmethod
    def parse_allowed_hosts(cls, v):
        """Parse allowed hosts from string or list"""
        if isinstance(v, str):
            return [host.strip() for host in v.split(",") if host.strip()]
        elif isinstance(v, list):
            return v
        return ["localhost", "127.0.0.1"]

    # Database
    DATABASE_URL: str = Field(...)
    DATABASE_ECHO: bool = Field(default=False)

    # Store transactions
    STORE_RETRY_ATTEMPTS: int = Field(default=1, ge=0)
    STORE_RETRY_BACKOFF: float = Field(default=0.05, ge=0)

    # Pagination
    DEFAULT_PAGE_SIZE: int = Field(default=30, ge=1)
    MAX_PAGE_SIZE: int = Field(default=100, ge=1)

    # Logging
    LOG_LEVEL: str = Field(default="INFO")
    STRUCTURED_LOGGING_ENABLED: bool = Field(default=False)

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )


# Create settings instance
settings = Settings()  # type: ignore[call-arg]
