"""
Model provider configuration settings.

Embedding and chat generation settings for Google Generative AI,
including timeout and retry policy for provider calls.

Dependencies: pydantic, pydantic_settings
System role: Provider configuration for embedding and generation clients
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from ragchat.configs.base import BaseSettings


class ProviderSettings(BaseSettings):
    """Google Generative AI provider configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="GOOGLE_",
        case_sensitive=False,
        extra="ignore",
    )

    api_key: str | None = Field(
        default=None,
        description="Google Generative AI API key (GOOGLE_API_KEY)",
    )

    embedding_model: str = Field(
        default="models/gemini-embedding-001",
        description="Embedding model ID",
    )
    embedding_dimension: int = Field(
        default=1536,
        description="Fixed embedding dimension D for every stored and queried vector",
        ge=1,
    )

    chat_model: str = Field(
        default="gemini-2.5-flash",
        description="Chat model ID used for answer generation",
    )
    temperature: float = Field(default=0.7, description="Generation temperature")
    max_output_tokens: int = Field(default=1000, description="Generation token limit")

    request_timeout: float = Field(
        default=60.0,
        description="Upper bound in seconds for a single provider call or stream fragment",
        gt=0,
    )
    max_retries: int = Field(
        default=3,
        description="Attempts for transient provider failures (1 disables retry)",
        ge=1,
    )
    retry_initial_wait: float = Field(default=1.0, description="Initial backoff in seconds")
    retry_max_wait: float = Field(default=10.0, description="Maximum backoff in seconds")

    @property
    def is_configured(self) -> bool:
        """Whether an API key is present."""
        return bool(self.api_key and self.api_key.strip())
