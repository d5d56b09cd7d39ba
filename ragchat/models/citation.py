"""
Citation domain model.

A numbered reference from an answer to one retrieved chunk. The number
matches the [n] label of the chunk in the prompt context.

Dependencies: pydantic
System role: Citation data structure (stream envelope, chat history, client)
"""

from pydantic import BaseModel, Field


class Citation(BaseModel):
    """Citation model for source attribution."""

    id: int = Field(ge=1, description="Citation number, 1-based in similarity order")
    filename: str = Field(description="Original name of the source document")
    content: str = Field(description="Cited chunk text")
    similarity: float = Field(description="Similarity of the chunk to the question")
