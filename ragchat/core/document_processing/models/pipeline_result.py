"""
Pipeline result model for document ingestion.

Represents the outcome of processing one document through the pipeline.

Dependencies: pydantic
System role: Return type for IngestionPipeline.process()
"""

import uuid

from pydantic import BaseModel, Field

from ragchat.boundary.db.models.document_model import DocumentStatus


class PipelineResult(BaseModel):
    """Result of document ingestion."""

    document_id: uuid.UUID = Field(description="Document identifier")
    status: DocumentStatus = Field(description="Final status (completed or failed)")
    chunk_count: int = Field(default=0, description="Number of chunks stored")
    error_message: str | None = Field(default=None, description="Failure reason when failed")
    processing_time_ms: float = Field(description="Total processing time in milliseconds")

    @property
    def succeeded(self) -> bool:
        return self.status == DocumentStatus.COMPLETED
