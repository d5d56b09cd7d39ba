"""
Database models package.

Exports:
  - DocumentModel, DocumentStatus: Document ORM model and status enum
  - DocumentChunkModel: Chunk rows with embeddings
  - ChatSessionModel, ChatMessageModel, MessageRole: Chat history

Dependencies: sqlalchemy, ragchat.boundary.db.base
System role: Database model definitions for domain entities
"""

from ragchat.boundary.db.models.chat_model import (
    ChatMessageModel,
    ChatSessionModel,
    MessageRole,
)
from ragchat.boundary.db.models.chunk_model import DocumentChunkModel
from ragchat.boundary.db.models.document_model import DocumentModel, DocumentStatus

__all__ = [
    "DocumentModel",
    "DocumentStatus",
    "DocumentChunkModel",
    "ChatSessionModel",
    "ChatMessageModel",
    "MessageRole",
]
