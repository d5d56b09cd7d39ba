"""
Document ingestion pipeline orchestrator.

Coordinates validation, extraction, splitting, embedding and atomic chunk
storage, recording every status transition on the document row.

Dependencies: All task modules, configs, ragchat.boundary
System role: Pipeline orchestration (coordinates only)
"""

import logging
import time
import uuid

from fastapi.concurrency import run_in_threadpool
from sqlalchemy.ext.asyncio import AsyncSession

from ragchat.boundary.db.CRUD.document_crud import document_crud
from ragchat.boundary.db.models.document_model import DocumentModel, DocumentStatus
from ragchat.boundary.vdb.sql_vector_store import SQLVectorStore
from ragchat.core.exceptions import (
    DocumentNotFoundError,
    ExtractionError,
    RagChatException,
    ValidationError,
)
from ragchat.core.providers.embedding_client import EmbeddingClient

from .configs import DocumentPipelineSettings, get_pipeline_settings
from .database import DocumentStatusUpdater
from .models import PipelineResult
from .tasks import EmbeddingTask, ExtractionTask, SplittingTask

logger = logging.getLogger(__name__)


def stored_filename(original_name: str) -> str:
    """Storage name for an upload: "{epoch_millis}_{original_name}"."""
    return f"{int(time.time() * 1000)}_{original_name}"


class IngestionPipeline:
    """Orchestrate document ingestion: extract -> split -> embed -> store."""

    def __init__(
        self,
        db: AsyncSession,
        embedding_client: EmbeddingClient,
        vector_store: SQLVectorStore | None = None,
        settings: DocumentPipelineSettings | None = None,
    ) -> None:
        """
        Initialize pipeline with its collaborators.

        Args:
            db: AsyncSession for document rows and chunks
            embedding_client: Client producing chunk embeddings
            vector_store: Chunk store (built on db when None)
            settings: Pipeline settings (uses defaults if None)
        """
        self.db = db
        self._settings = settings or get_pipeline_settings()
        self._vector_store = vector_store or SQLVectorStore(db, embedding_client.dimension)
        self._status = DocumentStatusUpdater(db)
        self._extraction_task = ExtractionTask()
        self._splitting_task = SplittingTask(
            chunk_size=self._settings.chunk_size,
            chunk_overlap=self._settings.chunk_overlap,
        )
        self._embedding_task = EmbeddingTask(embedding_client)

    def validate(self, filename: str, mime_type: str, size: int) -> None:
        """
        Check an upload before any state is created.

        Args:
            filename: Original file name
            mime_type: Declared media type
            size: Size in bytes

        Raises:
            ValidationError: Empty name, unsupported type or oversized file
        """
        if not filename or not filename.strip():
            raise ValidationError("Filename is required", field="filename")
        if mime_type not in self._settings.allowed_mime_types:
            raise ValidationError(
                f"Unsupported file type: {mime_type}",
                field="mime_type",
                details={"allowed": list(self._settings.allowed_mime_types)},
            )
        if size > self._settings.max_file_size:
            raise ValidationError(
                f"File exceeds maximum size of {self._settings.max_file_size} bytes",
                field="size",
                details={"size": size},
            )

    async def create_document(
        self,
        filename: str,
        mime_type: str,
        size: int,
        uploaded_by: str | None = None,
    ) -> DocumentModel:
        """
        Create the document row in UPLOADING state.

        Args:
            filename: Original file name
            mime_type: Declared media type
            size: Size in bytes
            uploaded_by: Owner reference (settings default when None)

        Returns:
            DocumentModel: Committed document
        """
        document = await document_crud.create(
            self.db,
            filename=stored_filename(filename),
            original_name=filename,
            mime_type=mime_type,
            size=size,
            uploaded_by=uploaded_by or self._settings.default_uploaded_by,
            status=DocumentStatus.UPLOADING,
        )
        await self.db.commit()

        logger.info(
            f"{__name__}:create_document - Document created",
            extra={"document_id": str(document.id), "original_name": filename},
        )
        return document

    async def process(self, document_id: uuid.UUID, content: bytes) -> PipelineResult:
        """
        Run extraction, splitting, embedding and storage for a created document.

        Failures are recorded on the document as FAILED and returned in the
        result, never raised.

        Args:
            document_id: Document in UPLOADING state
            content: Raw file bytes

        Returns:
            PipelineResult: Final status and chunk count

        Raises:
            DocumentNotFoundError: Document row does not exist
        """
        start_time = time.perf_counter()

        document = await document_crud.get_by_id(self.db, document_id)
        if document is None:
            raise DocumentNotFoundError(str(document_id))
        original_name = document.original_name
        mime_type = document.mime_type

        await self._status.mark_processing(document_id)

        try:
            text = await run_in_threadpool(
                self._extraction_task.extract, content, mime_type, str(document_id)
            )
            if not text.strip():
                raise ExtractionError(
                    "No text could be extracted from the document",
                    document_id=str(document_id),
                    mime_type=mime_type,
                )

            chunks = self._splitting_task.split(text)
            records = await self._embedding_task.embed(chunks, original_name, mime_type)
            stored = await self._vector_store.insert_chunks(document_id, records)

        except Exception as e:
            error_message = e.message if isinstance(e, RagChatException) else f"{type(e).__name__}: {e}"
            logger.error(
                f"{__name__}:process - Ingestion failed: {type(e).__name__}: {error_message}",
                extra={"document_id": str(document_id)},
            )
            await self.db.rollback()
            await self._status.mark_failed(document_id, error_message)
            return PipelineResult(
                document_id=document_id,
                status=DocumentStatus.FAILED,
                error_message=error_message,
                processing_time_ms=(time.perf_counter() - start_time) * 1000,
            )

        await self._status.mark_completed(document_id, stored)
        elapsed_ms = (time.perf_counter() - start_time) * 1000

        logger.info(
            f"{__name__}:process - Document completed",
            extra={
                "document_id": str(document_id),
                "chunk_count": stored,
                "processing_time_ms": round(elapsed_ms, 1),
            },
        )
        return PipelineResult(
            document_id=document_id,
            status=DocumentStatus.COMPLETED,
            chunk_count=stored,
            processing_time_ms=elapsed_ms,
        )

    async def ingest(
        self,
        filename: str,
        mime_type: str,
        content: bytes,
        uploaded_by: str | None = None,
        size: int | None = None,
    ) -> PipelineResult:
        """
        Validate, create and process a document in one call.

        Args:
            filename: Original file name
            mime_type: Declared media type
            content: Raw file bytes
            uploaded_by: Owner reference
            size: Declared size (defaults to len(content))

        Returns:
            PipelineResult: Final status and chunk count

        Raises:
            ValidationError: Upload rejected before any state was created
        """
        size = len(content) if size is None else size
        self.validate(filename, mime_type, size)
        document = await self.create_document(filename, mime_type, size, uploaded_by)
        return await self.process(document.id, content)
