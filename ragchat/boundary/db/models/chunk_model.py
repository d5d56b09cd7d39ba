"""
Document chunk ORM model.

Stores chunk text, its embedding vector and metadata. The integer primary
key follows insertion order and is the tie-breaker for equal similarity.

Dependencies: sqlalchemy, ragchat.boundary.db.base
System role: Chunk persistence backing the vector store
"""

import uuid
from datetime import datetime

from sqlalchemy import JSON, DateTime, ForeignKey, Integer, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ragchat.boundary.db.base import Base, utc_now


class DocumentChunkModel(Base):
    """
    Chunk of a document's extracted text.

    Immutable once created; removed only together with its parent document.

    Attributes:
        id: Auto-increment primary key (insertion order)
        document_id: Foreign key to documents.id (ON DELETE CASCADE)
        content: Chunk text
        embedding: Vector of exactly D floats
        chunk_metadata: {"chunkIndex": int, "filename": str, "mimeType": str, ...}
        created_at: Insert timestamp (UTC)
    """

    __tablename__ = "document_chunks"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    document_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("documents.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    content: Mapped[str] = mapped_column(Text, nullable=False)

    embedding: Mapped[list[float]] = mapped_column(JSON, nullable=False)

    # "metadata" is reserved on declarative classes
    chunk_metadata: Mapped[dict] = mapped_column(
        "metadata",
        JSON,
        nullable=False,
        default=dict,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
    )

    # Relationships
    document = relationship("DocumentModel", back_populates="chunks")
