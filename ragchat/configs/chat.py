"""
Chat configuration settings.

Dependencies: pydantic_settings
System role: Retrieval and chat defaults
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from ragchat.configs.base import BaseSettings


class ChatSettings(BaseSettings):
    """Retrieval depth and chat session defaults."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="CHAT_",
        case_sensitive=False,
        extra="ignore",
    )

    top_k: int = Field(default=5, description="Chunks retrieved per question", ge=1)
    default_user_id: str = Field(
        default="development-user",
        description="Owner recorded for sessions created without a user id",
    )
    max_message_length: int = Field(
        default=4000,
        description="Maximum accepted length of a user message",
    )
