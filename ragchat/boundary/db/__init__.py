"""
Database boundary layer: ORM models, CRUD operations, and connection management.

Exports:
  - Base, TimestampMixin, UUIDMixin: Model building blocks
  - get_async_engine(), get_async_session_factory(), get_async_db(): Connection management
  - DocumentModel, DocumentChunkModel, ChatSessionModel, ChatMessageModel: Entities
  - DocumentStatus, MessageRole: Enum types
  - document_crud, chat_crud: CRUD operation singletons

Dependencies: sqlalchemy, ragchat.configs
System role: Database adapter for documents, chunks and chat history
"""

from ragchat.boundary.db.base import Base, TimestampMixin, UUIDMixin
from ragchat.boundary.db.connection import (
    get_async_db,
    get_async_engine,
    get_async_session_factory,
)
from ragchat.boundary.db.CRUD import (
    BaseCRUD,
    ChatCRUD,
    DocumentCRUD,
    chat_crud,
    document_crud,
)
from ragchat.boundary.db.models import (
    ChatMessageModel,
    ChatSessionModel,
    DocumentChunkModel,
    DocumentModel,
    DocumentStatus,
    MessageRole,
)

__all__ = [
    # Base classes
    "Base",
    "TimestampMixin",
    "UUIDMixin",
    # Connection
    "get_async_db",
    "get_async_engine",
    "get_async_session_factory",
    # Models
    "DocumentModel",
    "DocumentStatus",
    "DocumentChunkModel",
    "ChatSessionModel",
    "ChatMessageModel",
    "MessageRole",
    # CRUD
    "BaseCRUD",
    "DocumentCRUD",
    "ChatCRUD",
    "document_crud",
    "chat_crud",
]
