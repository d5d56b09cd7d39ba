"""
Vector store schemas.

Pydantic models for chunk inserts and search results.
Used for type-safe vector store interactions.

Dependencies: pydantic
System role: Type definitions for vector operations
"""

import uuid

from pydantic import BaseModel, Field, field_validator

MetadataValue = str | int | float | bool | None

CHUNK_INDEX_KEY = "chunkIndex"


class ChunkRecord(BaseModel):
    """
    Chunk ready for insertion.

    Metadata maps string keys to scalar values. "chunkIndex" (zero-based
    position among sibling chunks) is required; other keys pass through.
    """

    content: str = Field(min_length=1, description="Chunk text content")
    embedding: list[float] = Field(description="Embedding vector")
    metadata: dict[str, MetadataValue] = Field(description="Chunk metadata")

    @field_validator("metadata")
    @classmethod
    def require_chunk_index(cls, value: dict[str, MetadataValue]) -> dict[str, MetadataValue]:
        """Ensure the chunkIndex key holds a non-negative integer."""
        index = value.get(CHUNK_INDEX_KEY)
        if isinstance(index, bool) or not isinstance(index, int) or index < 0:
            raise ValueError(f"metadata.{CHUNK_INDEX_KEY} must be a non-negative integer")
        return value


class VectorSearchResult(BaseModel):
    """Single result from vector search."""

    chunk_id: int = Field(description="Chunk identifier (insertion order)")
    document_id: uuid.UUID = Field(description="Parent document")
    filename: str = Field(description="Original name of the parent document")
    content: str = Field(description="Chunk text content")
    metadata: dict[str, MetadataValue] = Field(default_factory=dict, description="Chunk metadata")
    similarity: float = Field(description="1 - cosine distance to the query")
