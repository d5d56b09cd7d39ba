"""
Base configuration settings.

Every settings class in ragchat derives from BaseSettings so they share the
same .env handling. Application-wide fields (environment, debug, log level,
API bind address) are read with the RAGCHAT_ prefix, e.g. RAGCHAT_LOG_LEVEL.
Subclasses set their own prefix (POSTGRES_, GOOGLE_, CHAT_).

Dependencies: pydantic_settings
System role: Foundation for all configuration classes
"""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings as PydanticBaseSettings, SettingsConfigDict

LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})


class BaseSettings(PydanticBaseSettings):
    """Shared .env handling and application-wide ragchat settings."""

    model_config = SettingsConfigDict(
        env_prefix="RAGCHAT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    environment: Literal["development", "test", "production"] = Field(
        default="development",
        description="Deployment environment",
    )
    debug: bool = Field(
        default=False,
        description="FastAPI debug mode (tracebacks in 500 responses)",
    )
    log_level: str = Field(
        default="INFO",
        description="Root log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    api_host: str = Field(default="0.0.0.0", description="uvicorn bind host")
    api_port: int = Field(default=8000, ge=1, le=65535, description="uvicorn bind port")

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Unknown log level: {value}")
        return level
