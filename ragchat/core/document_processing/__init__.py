"""
Document ingestion pipeline.

Extracts, splits, embeds and stores uploaded documents.

Dependencies: langchain_community, docx, pydantic, ragchat.core.providers
System role: Document ingestion pipeline entrypoint
"""

from .configs import (
    DocumentPipelineSettings,
    get_pipeline_settings,
)
from .models import PipelineResult
from .pipeline import IngestionPipeline

__all__ = [
    "IngestionPipeline",
    "DocumentPipelineSettings",
    "get_pipeline_settings",
    "PipelineResult",
]
