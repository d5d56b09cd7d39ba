"""
Document domain models and schemas.

Response schemas for document operations.

Dependencies: pydantic
System role: Document API contracts
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict

from ragchat.boundary.db.models.document_model import DocumentStatus


class DocumentResponse(BaseModel):
    """Response schema for document operations."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    filename: str
    original_name: str
    mime_type: str
    size: int
    uploaded_by: str
    uploaded_at: datetime
    status: DocumentStatus
    chunk_count: int
    error_message: str | None = None


class DocumentListResponse(BaseModel):
    """Document list response, newest first."""

    documents: list[DocumentResponse]
    total: int
