"""
Document status updater.

Moves a document through its ingestion states:
UPLOADING → PROCESSING → COMPLETED (or FAILED with error message)

Every transition is committed on its own so the status is visible to
readers while processing continues.

Dependencies: sqlalchemy, ragchat.boundary.db
System role: Status persistence for the ingestion pipeline
"""

import logging
import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from ragchat.boundary.db.CRUD.document_crud import document_crud
from ragchat.boundary.db.models.document_model import DocumentStatus
from ragchat.core.exceptions import DocumentNotFoundError

logger = logging.getLogger(__name__)

MAX_ERROR_MESSAGE_LENGTH = 2000


class DocumentStatusUpdater:
    """Update document status during ingestion."""

    def __init__(self, db_session: AsyncSession) -> None:
        """
        Initialize with database session.

        Args:
            db_session: AsyncSession holding the documents table
        """
        self.db = db_session

    async def _transition(
        self,
        operation: str,
        document_id: uuid.UUID,
        status: DocumentStatus,
        error_message: str | None = None,
        chunk_count: int | None = None,
    ) -> None:
        try:
            document = await document_crud.update_status(
                self.db,
                document_id,
                status,
                error_message=error_message,
                chunk_count=chunk_count,
            )
            if document is None:
                raise DocumentNotFoundError(str(document_id))
            await self.db.commit()
        except Exception as e:
            logger.error(f"{__name__}:{operation} - {type(e).__name__}: {e}")
            await self.db.rollback()
            raise

        logger.info(
            f"{__name__}:{operation} - Document marked as {status.name}",
            extra={"document_id": str(document_id), "error_message": error_message},
        )

    async def mark_processing(self, document_id: uuid.UUID) -> None:
        """
        Mark document as PROCESSING.

        Args:
            document_id: Document UUID

        Raises:
            DocumentNotFoundError: Document not found
        """
        await self._transition("mark_processing", document_id, DocumentStatus.PROCESSING)

    async def mark_completed(self, document_id: uuid.UUID, chunk_count: int) -> None:
        """
        Mark document as COMPLETED and record its chunk count.

        Args:
            document_id: Document UUID
            chunk_count: Number of stored chunks

        Raises:
            DocumentNotFoundError: Document not found
        """
        await self._transition(
            "mark_completed",
            document_id,
            DocumentStatus.COMPLETED,
            chunk_count=chunk_count,
        )

    async def mark_failed(self, document_id: uuid.UUID, error_message: str) -> None:
        """
        Mark document as FAILED with error details.

        Args:
            document_id: Document UUID
            error_message: Human-readable error description

        Raises:
            DocumentNotFoundError: Document not found
        """
        await self._transition(
            "mark_failed",
            document_id,
            DocumentStatus.FAILED,
            error_message=error_message[:MAX_ERROR_MESSAGE_LENGTH],
            chunk_count=0,
        )
