"""
Document ORM model.

Represents uploaded documents with ingestion status and file metadata.
Tracks the document lifecycle from upload to searchable chunks.

Dependencies: sqlalchemy, ragchat.boundary.db.base
System role: Document persistence for ingestion tracking
"""

import enum
from datetime import datetime

from sqlalchemy import DateTime, Enum, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ragchat.boundary.db.base import Base, UUIDMixin, utc_now


class DocumentStatus(str, enum.Enum):
    """
    Document ingestion lifecycle states.

    UPLOADING: Record created, ingestion not started
    PROCESSING: Extraction, splitting and embedding in progress
    COMPLETED: Chunks stored, document eligible for retrieval
    FAILED: Ingestion error; error_message field contains details
    """

    UPLOADING = "uploading"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class DocumentModel(Base, UUIDMixin):
    """
    Document ORM model tracking ingestion pipeline state.

    Lifecycle: UPLOADING → PROCESSING → COMPLETED | FAILED. Only COMPLETED
    documents take part in similarity search.

    Attributes:
        id: UUID primary key (auto-generated)
        filename: Stored name, "{epoch_millis}_{original_name}"
        original_name: Filename as uploaded
        mime_type: Declared media type
        size: Declared size in bytes
        uploaded_by: Owner reference
        uploaded_at: Upload timestamp (UTC)
        status: Current ingestion state
        error_message: Null unless FAILED
        chunk_count: Number of stored chunks (0 until COMPLETED)

    Relationships:
        chunks: DocumentChunkModel rows (cascade delete)
    """

    __tablename__ = "documents"

    filename: Mapped[str] = mapped_column(String(255), nullable=False)
    original_name: Mapped[str] = mapped_column(String(255), nullable=False)
    mime_type: Mapped[str] = mapped_column(String(100), nullable=False)
    size: Mapped[int] = mapped_column(Integer, nullable=False)
    uploaded_by: Mapped[str] = mapped_column(String(255), nullable=False)

    uploaded_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
    )

    status: Mapped[DocumentStatus] = mapped_column(
        Enum(
            DocumentStatus,
            native_enum=False,
            length=20,
            values_callable=lambda statuses: [s.value for s in statuses],
        ),
        nullable=False,
        default=DocumentStatus.UPLOADING,
        index=True,
    )

    error_message: Mapped[str | None] = mapped_column(Text, nullable=True)

    chunk_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Relationships
    chunks = relationship(
        "DocumentChunkModel",
        back_populates="document",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
