"""
Document service orchestrator.

Coordinates document upload, background processing, listing and deletion.

Dependencies: sqlalchemy, ragchat.core.document_processing, ragchat.boundary
System role: Document management orchestration
"""

import logging
from typing import Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from ragchat.boundary.db.CRUD.document_crud import document_crud
from ragchat.boundary.db.models.document_model import DocumentModel
from ragchat.boundary.vdb.sql_vector_store import SQLVectorStore
from ragchat.core.document_processing import IngestionPipeline, PipelineResult
from ragchat.core.exceptions import DocumentNotFoundError, ProviderUnavailable

logger = logging.getLogger(__name__)


class DocumentService:
    """
    Document service orchestrator.

    Upload is split in two: register_upload validates and records the
    document, process_upload runs ingestion (normally in a background task).
    """

    def __init__(
        self,
        db: AsyncSession,
        vector_store: SQLVectorStore,
        pipeline: IngestionPipeline | None = None,
    ) -> None:
        """
        Initialize document service.

        Args:
            db: AsyncSession for document metadata
            vector_store: Chunk store used for deletion
            pipeline: Ingestion pipeline bound to the same session (uploads only)
        """
        self.db = db
        self.vector_store = vector_store
        self._pipeline = pipeline

    @property
    def pipeline(self) -> IngestionPipeline:
        """Ingestion pipeline; only services built with an embedding provider have one."""
        if self._pipeline is None:
            raise ProviderUnavailable(
                "Document ingestion requires a configured embedding provider",
                provider="embedding",
            )
        return self._pipeline

    async def register_upload(
        self,
        filename: str,
        mime_type: str,
        size: int,
        uploaded_by: str | None = None,
    ) -> DocumentModel:
        """
        Validate an upload and create its document in UPLOADING state.

        Args:
            filename: Original file name
            mime_type: Declared media type
            size: Size in bytes
            uploaded_by: Owner reference

        Returns:
            DocumentModel: Created document

        Raises:
            ValidationError: Upload rejected (nothing created)
        """
        self.pipeline.validate(filename, mime_type, size)
        return await self.pipeline.create_document(filename, mime_type, size, uploaded_by)

    async def process_upload(self, document_id: UUID, content: bytes) -> PipelineResult:
        """
        Ingest the content of a registered document.

        Args:
            document_id: Document in UPLOADING state
            content: Raw file bytes

        Returns:
            PipelineResult: Final status and chunk count
        """
        return await self.pipeline.process(document_id, content)

    async def list_documents(self) -> Sequence[DocumentModel]:
        """List all documents, newest first."""
        return await document_crud.list_newest_first(self.db)

    async def get_document(self, document_id: UUID) -> DocumentModel:
        """
        Get a document by id.

        Raises:
            DocumentNotFoundError: No such document
        """
        document = await document_crud.get_by_id(self.db, document_id)
        if document is None:
            raise DocumentNotFoundError(str(document_id))
        return document

    async def delete_document(self, document_id: UUID) -> bool:
        """
        Delete a document and its chunks.

        Args:
            document_id: Document UUID

        Returns:
            bool: False when the document did not exist

        Raises:
            StorageError: Delete failed (nothing removed)
        """
        deleted = await self.vector_store.delete_document(document_id)
        if not deleted:
            logger.info(
                f"{__name__}:delete_document - Document already absent",
                extra={"document_id": str(document_id)},
            )
        return deleted
