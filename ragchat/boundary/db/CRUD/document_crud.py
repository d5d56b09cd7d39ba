"""
Document CRUD operations.

Provides Create, Read, Update, Delete operations for DocumentModel
with document-specific queries for listing and status tracking.

Dependencies: sqlalchemy, ragchat.boundary.db.models
System role: Document persistence operations
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ragchat.boundary.db.CRUD.base_crud import BaseCRUD
from ragchat.boundary.db.models.document_model import DocumentModel, DocumentStatus


class DocumentCRUD(BaseCRUD[DocumentModel]):
    """
    CRUD operations for DocumentModel.

    Extends BaseCRUD with newest-first listing and status transitions.
    """

    def __init__(self) -> None:
        """Initialize DocumentCRUD with DocumentModel."""
        super().__init__(DocumentModel)

    async def list_newest_first(
        self,
        session: AsyncSession,
        limit: int | None = None,
        offset: int = 0,
    ) -> Sequence[DocumentModel]:
        """
        Retrieve documents ordered by upload time, newest first.

        Args:
            session: Async database session
            limit: Maximum number of documents to return
            offset: Number of documents to skip

        Returns:
            Sequence of DocumentModels
        """
        stmt = (
            select(DocumentModel)
            .order_by(DocumentModel.uploaded_at.desc())
            .offset(offset)
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def get_by_status(
        self,
        session: AsyncSession,
        status: DocumentStatus,
        limit: int | None = None,
    ) -> Sequence[DocumentModel]:
        """
        Retrieve documents by ingestion status.

        Args:
            session: Async database session
            status: Status to filter by
            limit: Maximum number of documents to return

        Returns:
            Sequence of DocumentModels with matching status
        """
        stmt = select(DocumentModel).where(DocumentModel.status == status)
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def update_status(
        self,
        session: AsyncSession,
        id: UUID,
        status: DocumentStatus,
        error_message: str | None = None,
        chunk_count: int | None = None,
    ) -> DocumentModel | None:
        """
        Update document status, error message and chunk count.

        Args:
            session: Async database session
            id: Document UUID
            status: New status
            error_message: Error details (cleared when None)
            chunk_count: Stored chunk count (unchanged when None)

        Returns:
            Updated DocumentModel if found, None otherwise
        """
        document = await self.get_by_id(session, id)
        if document is None:
            return None
        document.status = status
        document.error_message = error_message
        if chunk_count is not None:
            document.chunk_count = chunk_count
        await session.flush()
        return document


document_crud = DocumentCRUD()
