"""
Dependency injection module.

Exports: FastAPI dependency factories and the provider client cache
"""

from ragchat.api.deps.dependencies import (
    ServiceCache,
    get_chat_service,
    get_db_session_factory,
    get_document_service,
    get_embedding_client,
    get_generation_client,
    get_retrieval_service,
    get_service_cache,
    get_session_service,
    get_settings_dependency,
    get_upload_document_service,
    get_vector_store,
)

__all__ = [
    "ServiceCache",
    "get_service_cache",
    "get_settings_dependency",
    "get_db_session_factory",
    "get_embedding_client",
    "get_generation_client",
    "get_vector_store",
    "get_retrieval_service",
    "get_chat_service",
    "get_document_service",
    "get_upload_document_service",
    "get_session_service",
]
