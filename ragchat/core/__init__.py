"""
Core business logic module.

Contains the exception hierarchy, the document ingestion pipeline,
provider clients, retrieval and the citation streaming protocol.
"""

from ragchat.core.exceptions import (
    DocumentNotFoundError,
    ExtractionError,
    ProviderError,
    ProviderUnavailable,
    RagChatException,
    SessionNotFoundError,
    StorageError,
    ValidationError,
)

__all__ = [
    "RagChatException",
    "ValidationError",
    "ExtractionError",
    "ProviderUnavailable",
    "ProviderError",
    "StorageError",
    "DocumentNotFoundError",
    "SessionNotFoundError",
]
