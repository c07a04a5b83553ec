"""
Configuration module for the Scheduling Policy service.
Loads settings from environment variables.
"""

from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Service identity
    service_name: str = Field(
        default="scheduling-policy-service",
        alias="SERVICE_NAME",
        description="Name reported to tool clients and health checks"
    )
    service_version: str = Field(
        default="0.1.0",
        alias="SERVICE_VERSION",
        description="Version reported to tool clients and health checks"
    )

    # Application Configuration
    app_host: str = Field(
        default="0.0.0.0",
        alias="APP_HOST",
        description="Host to bind the application"
    )
    app_port: int = Field(
        default=8000,
        alias="APP_PORT",
        description="Port to bind the application"
    )

    # Data Store Configuration
    policy_store: str = Field(
        default="memory",
        alias="POLICY_STORE",
        description="Policy storage backend: 'memory' or 'cosmos'"
    )

    # Conflict checks
    default_check_duration_minutes: int = Field(
        default=30,
        alias="DEFAULT_CHECK_DURATION_MINUTES",
        description="Duration assumed by policy_check when the caller omits one"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        alias="LOG_LEVEL",
        description="Logging level"
    )

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


# Global settings instance
settings = Settings()
