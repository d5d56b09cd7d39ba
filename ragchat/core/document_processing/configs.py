"""
Configuration settings for document ingestion pipeline.

Provides environment-based configuration for validation and splitting.

Dependencies: pydantic, pydantic_settings
System role: Centralized pipeline configuration
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

PDF_MIME_TYPE = "application/pdf"
DOCX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
TEXT_MIME_TYPE = "text/plain"


class DocumentPipelineSettings(BaseSettings):
    """Settings for document ingestion pipeline."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="DOC_PIPELINE_",
        case_sensitive=False,
        extra="ignore",
    )

    # Splitting settings
    chunk_size: int = Field(
        default=1000,
        description="Maximum chunk size in characters",
        ge=1,
    )
    chunk_overlap: int = Field(
        default=200,
        description="Overlap between consecutive chunks",
        ge=0,
    )

    # Upload validation
    max_file_size: int = Field(
        default=10 * 1024 * 1024,
        description="Maximum accepted upload size in bytes",
    )
    allowed_mime_types: list[str] = Field(
        default=[PDF_MIME_TYPE, DOCX_MIME_TYPE, TEXT_MIME_TYPE],
        description="Media types accepted for ingestion",
    )
    default_uploaded_by: str = Field(
        default="development-user",
        description="Owner recorded when an upload has no user",
    )


@lru_cache
def get_pipeline_settings() -> DocumentPipelineSettings:
    """
    Get cached pipeline settings instance.

    Returns:
        DocumentPipelineSettings: Singleton settings loaded from environment
    """
    return DocumentPipelineSettings()
