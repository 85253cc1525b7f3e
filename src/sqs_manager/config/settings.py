"""
Module: settings.py
Description: Application configuration using pydantic-settings.

Loads client settings for the SQS manager from environment variables
(prefixed with SQS_MANAGER_) with validation and defaults. Supports
.env files for local development against LocalStack.
"""

from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """SQS manager settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="SQS_MANAGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    log_level: str = Field(default="INFO", description="Logging level")

    # AWS settings
    aws_region: str = Field(default="us-east-1", description="AWS region of the queues")
    endpoint_url: Optional[str] = Field(
        default=None,
        description="Override endpoint (e.g. LocalStack), None for the AWS default"
    )

    # Transport settings handed to botocore
    connect_timeout: float = Field(default=5.0, gt=0, description="Connect timeout in seconds")
    read_timeout: float = Field(
        default=30.0,
        gt=0,
        description="Read timeout in seconds (must exceed the long-poll wait time)"
    )
    max_attempts: int = Field(
        default=4,
        ge=1,
        le=10,
        description="Maximum transport attempts performed by botocore"
    )
    max_pool_connections: int = Field(
        default=64,
        ge=1,
        description="Maximum number of pooled HTTP connections"
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a valid logging level."""
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in valid_levels:
            raise ValueError(f"log_level must be one of: {', '.join(valid_levels)}")
        return v.upper()


# Global settings instance
settings = Settings()
