"""
Document router utilities.

Background ingestion of uploaded documents.

Dependencies: sqlalchemy, ragchat.core.document_processing
System role: Background processing for the documents API
"""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ragchat.boundary.vdb.sql_vector_store import SQLVectorStore
from ragchat.core.document_processing import IngestionPipeline, get_pipeline_settings
from ragchat.core.providers import EmbeddingClient
from ragchat.observability.log_utils import log_exception_with_context

logger = logging.getLogger(__name__)


async def process_document_background(
    document_id: UUID,
    content: bytes,
    session_factory: async_sessionmaker[AsyncSession],
    embedding_client: EmbeddingClient,
) -> None:
    """
    Background task for document ingestion.

    Creates its own async database session for the background context.
    The pipeline records failures on the document; anything it raises is
    logged here since no client is waiting for the result.

    Args:
        document_id: Document in UPLOADING state
        content: Raw file bytes
        session_factory: Factory for a fresh database session
        embedding_client: Client producing chunk embeddings
    """
    logger.info(
        "Starting background document processing",
        extra={"document_id": str(document_id), "size": len(content)},
    )

    async with session_factory() as db:
        pipeline = IngestionPipeline(
            db=db,
            embedding_client=embedding_client,
            vector_store=SQLVectorStore(db, embedding_client.dimension),
            settings=get_pipeline_settings(),
        )
        try:
            result = await pipeline.process(document_id, content)
        except Exception as e:
            log_exception_with_context(
                logger,
                "Background document processing failed",
                e,
                document_id=str(document_id),
            )
            return

    logger.info(
        "Background document processing finished",
        extra={
            "document_id": str(document_id),
            "status": result.status.value,
            "chunk_count": result.chunk_count,
            "processing_time_ms": round(result.processing_time_ms, 1),
        },
    )
