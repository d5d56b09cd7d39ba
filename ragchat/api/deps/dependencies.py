"""
Dependency injection container.

Factory functions for FastAPI dependencies.

Dependencies: ragchat.configs, ragchat.application, ragchat.boundary, ragchat.core
System role: DI container for service injection
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ragchat.application.services import ChatService, DocumentService, SessionService
from ragchat.boundary.db import get_async_db, get_async_session_factory
from ragchat.boundary.vdb.sql_vector_store import SQLVectorStore
from ragchat.configs import Settings, get_settings
from ragchat.core.document_processing import IngestionPipeline, get_pipeline_settings
from ragchat.core.providers import EmbeddingClient, GenerationClient
from ragchat.core.retrieval import RetrievalService


class ServiceCache:
    """
    Container for cached provider clients.

    Clients are built on first use; a missing API key raises
    ProviderUnavailable on every access until configured.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings
        self._embedding_client: EmbeddingClient | None = None
        self._generation_client: GenerationClient | None = None

    @property
    def settings(self) -> Settings:
        return self._settings or get_settings()

    @property
    def embedding_client(self) -> EmbeddingClient:
        """Get cached embedding client."""
        if self._embedding_client is None:
            self._embedding_client = EmbeddingClient.from_settings(self.settings.providers)
        return self._embedding_client

    @property
    def generation_client(self) -> GenerationClient:
        """Get cached generation client."""
        if self._generation_client is None:
            self._generation_client = GenerationClient.from_settings(self.settings.providers)
        return self._generation_client

    def clear(self) -> None:
        """Clear all cached instances."""
        self._embedding_client = None
        self._generation_client = None


# Global service cache
_service_cache = ServiceCache()


def get_service_cache() -> ServiceCache:
    """Get service cache singleton."""
    return _service_cache


def get_settings_dependency() -> Settings:
    """Get settings singleton."""
    return get_settings()


def get_db_session_factory() -> async_sessionmaker[AsyncSession]:
    """Get the session factory used outside the request scope."""
    return get_async_session_factory()


def get_embedding_client() -> EmbeddingClient:
    """
    Get the embedding client.

    Raises:
        ProviderUnavailable: Provider not configured
    """
    return get_service_cache().embedding_client


def get_generation_client() -> GenerationClient:
    """
    Get the generation client.

    Raises:
        ProviderUnavailable: Provider not configured
    """
    return get_service_cache().generation_client


def get_vector_store(
    db: AsyncSession = Depends(get_async_db),
    settings: Settings = Depends(get_settings_dependency),
) -> SQLVectorStore:
    """Get a vector store bound to the request session."""
    return SQLVectorStore(db, settings.providers.embedding_dimension)


def get_retrieval_service(
    embedding_client: EmbeddingClient = Depends(get_embedding_client),
    vector_store: SQLVectorStore = Depends(get_vector_store),
) -> RetrievalService:
    """Get retrieval service instance."""
    return RetrievalService(embedding_client, vector_store)


def get_chat_service(
    db: AsyncSession = Depends(get_async_db),
    retrieval_service: RetrievalService = Depends(get_retrieval_service),
    generation_client: GenerationClient = Depends(get_generation_client),
    settings: Settings = Depends(get_settings_dependency),
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_db_session_factory),
) -> ChatService:
    """
    Get chat service instance.

    The assistant message is written through a fresh session because the
    response body outlives the request-scoped one.

    Returns:
        ChatService: Chat service instance
    """
    return ChatService(
        db=db,
        retrieval_service=retrieval_service,
        generation_client=generation_client,
        settings=settings.chat,
        session_factory=session_factory,
    )


def get_document_service(
    db: AsyncSession = Depends(get_async_db),
    vector_store: SQLVectorStore = Depends(get_vector_store),
) -> DocumentService:
    """
    Get document service instance for reads and deletes.

    Returns:
        DocumentService: Document service without ingestion pipeline
    """
    return DocumentService(db=db, vector_store=vector_store)


def get_upload_document_service(
    db: AsyncSession = Depends(get_async_db),
    vector_store: SQLVectorStore = Depends(get_vector_store),
    embedding_client: EmbeddingClient = Depends(get_embedding_client),
) -> DocumentService:
    """
    Get document service instance able to ingest uploads.

    Raises:
        ProviderUnavailable: Embedding provider not configured

    Returns:
        DocumentService: Document service with ingestion pipeline
    """
    pipeline = IngestionPipeline(
        db=db,
        embedding_client=embedding_client,
        vector_store=vector_store,
        settings=get_pipeline_settings(),
    )
    return DocumentService(db=db, vector_store=vector_store, pipeline=pipeline)


def get_session_service(
    db: AsyncSession = Depends(get_async_db),
    settings: Settings = Depends(get_settings_dependency),
) -> SessionService:
    """
    Get session service instance.

    Args:
        db: Async database session (injected via Depends)
        settings: Application settings

    Returns:
        SessionService: Session service instance
    """
    return SessionService(db=db, settings=settings.chat)
