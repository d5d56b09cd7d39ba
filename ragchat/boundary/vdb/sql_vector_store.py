"""
SQL-backed vector store with exact cosine search.

Chunks and embeddings live in the document_chunks table; search scores every
chunk of a completed document with numpy and returns the top k.

Dependencies: sqlalchemy, numpy, ragchat.boundary.db
System role: Vector store (insert, search, cascade delete)
"""

import logging
import uuid
from typing import Sequence

import numpy as np
from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ragchat.boundary.db.models.chunk_model import DocumentChunkModel
from ragchat.boundary.db.models.document_model import DocumentModel, DocumentStatus
from ragchat.boundary.vdb.vector_schemas import ChunkRecord, VectorSearchResult
from ragchat.core.exceptions import StorageError, ValidationError

logger = logging.getLogger(__name__)


def cosine_similarities(query: np.ndarray, matrix: np.ndarray) -> np.ndarray:
    """
    Cosine similarity between one query vector and each row of a matrix.

    Rows (or a query) with zero norm score 0.0.

    Args:
        query: Vector of shape (D,)
        matrix: Array of shape (N, D)

    Returns:
        np.ndarray: Similarities of shape (N,), clipped to [-1, 1]
    """
    dots = matrix @ query
    denominators = np.linalg.norm(matrix, axis=1) * np.linalg.norm(query)
    similarities = np.divide(
        dots,
        denominators,
        out=np.zeros_like(dots, dtype=float),
        where=denominators > 0,
    )
    return np.clip(similarities, -1.0, 1.0)


class SQLVectorStore:
    """
    Vector store over the relational chunk table.

    Each write operation is its own transaction: it commits on success and
    rolls back before raising StorageError.
    """

    def __init__(self, db: AsyncSession, dimension: int) -> None:
        """
        Initialize vector store.

        Args:
            db: AsyncSession for chunk storage
            dimension: Required embedding dimension D

        Raises:
            ValueError: When dimension is not positive
        """
        if dimension < 1:
            raise ValueError("dimension must be positive")
        self.db = db
        self.dimension = dimension

    async def insert_chunks(
        self,
        document_id: uuid.UUID,
        chunks: Sequence[ChunkRecord],
    ) -> int:
        """
        Persist all chunks of a document in one transaction.

        Args:
            document_id: Parent document UUID
            chunks: Chunks with embeddings and metadata

        Returns:
            int: Number of chunks stored

        Raises:
            StorageError: Dimension mismatch or database failure (nothing stored)
        """
        for chunk in chunks:
            if len(chunk.embedding) != self.dimension:
                raise StorageError(
                    f"Embedding has {len(chunk.embedding)} components, expected {self.dimension}",
                    operation="insert_chunks",
                    details={"document_id": str(document_id)},
                )
        if not chunks:
            return 0

        try:
            self.db.add_all(
                [
                    DocumentChunkModel(
                        document_id=document_id,
                        content=chunk.content,
                        embedding=list(chunk.embedding),
                        chunk_metadata=dict(chunk.metadata),
                    )
                    for chunk in chunks
                ]
            )
            await self.db.flush()
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(
                f"{__name__}:insert_chunks - Rolled back: {type(e).__name__}: {e}",
                extra={"document_id": str(document_id), "chunk_count": len(chunks)},
            )
            raise StorageError(
                f"Failed to store chunks: {e}",
                operation="insert_chunks",
                details={"document_id": str(document_id)},
            ) from e

        logger.info(
            f"{__name__}:insert_chunks - Stored {len(chunks)} chunks",
            extra={"document_id": str(document_id)},
        )
        return len(chunks)

    async def search(
        self,
        query_embedding: Sequence[float],
        k: int,
    ) -> list[VectorSearchResult]:
        """
        Find the k chunks most similar to the query among completed documents.

        Results are ordered by decreasing similarity; equal similarities keep
        insertion order.

        Args:
            query_embedding: Query vector of D floats
            k: Maximum number of results (>= 1)

        Returns:
            list[VectorSearchResult]: At most k results

        Raises:
            ValidationError: k < 1 or query dimension mismatch
            StorageError: Database failure or inconsistent stored vectors
        """
        if k < 1:
            raise ValidationError("k must be at least 1", field="k")
        if len(query_embedding) != self.dimension:
            raise ValidationError(
                f"Query embedding has {len(query_embedding)} components, expected {self.dimension}",
                field="query_embedding",
            )

        stmt = (
            select(
                DocumentChunkModel.id,
                DocumentChunkModel.document_id,
                DocumentChunkModel.content,
                DocumentChunkModel.chunk_metadata,
                DocumentChunkModel.embedding,
                DocumentModel.original_name,
            )
            .join(DocumentModel, DocumentModel.id == DocumentChunkModel.document_id)
            .where(DocumentModel.status == DocumentStatus.COMPLETED)
            .order_by(DocumentChunkModel.id.asc())
        )
        try:
            rows = (await self.db.execute(stmt)).all()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"{__name__}:search - {type(e).__name__}: {e}")
            raise StorageError(f"Similarity search failed: {e}", operation="search") from e

        if not rows:
            return []

        try:
            matrix = np.asarray([row.embedding for row in rows], dtype=float)
        except ValueError as e:
            raise StorageError(
                "Stored embeddings have inconsistent dimensions",
                operation="search",
            ) from e
        if matrix.ndim != 2 or matrix.shape[1] != self.dimension:
            raise StorageError(
                f"Stored embeddings do not have {self.dimension} components",
                operation="search",
            )

        similarities = cosine_similarities(np.asarray(query_embedding, dtype=float), matrix)
        ranked = sorted(range(len(rows)), key=lambda i: (-similarities[i], rows[i].id))

        return [
            VectorSearchResult(
                chunk_id=rows[i].id,
                document_id=rows[i].document_id,
                filename=rows[i].original_name,
                content=rows[i].content,
                metadata=rows[i].chunk_metadata or {},
                similarity=float(similarities[i]),
            )
            for i in ranked[:k]
        ]

    async def delete_document(self, document_id: uuid.UUID) -> bool:
        """
        Delete a document and all of its chunks.

        Args:
            document_id: Document UUID

        Returns:
            bool: True if the document existed, False for a missing id

        Raises:
            StorageError: Database failure (nothing deleted)
        """
        try:
            await self.db.execute(
                delete(DocumentChunkModel).where(DocumentChunkModel.document_id == document_id)
            )
            result = await self.db.execute(
                delete(DocumentModel).where(DocumentModel.id == document_id)
            )
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(
                f"{__name__}:delete_document - {type(e).__name__}: {e}",
                extra={"document_id": str(document_id)},
            )
            raise StorageError(
                f"Failed to delete document: {e}",
                operation="delete_document",
                details={"document_id": str(document_id)},
            ) from e

        deleted = result.rowcount > 0
        logger.info(
            f"{__name__}:delete_document - deleted={deleted}",
            extra={"document_id": str(document_id)},
        )
        return deleted

    async def count_chunks(self, document_id: uuid.UUID) -> int:
        """
        Count stored chunks of a document.

        Args:
            document_id: Document UUID

        Returns:
            int: Number of chunk rows
        """
        stmt = (
            select(func.count())
            .select_from(DocumentChunkModel)
            .where(DocumentChunkModel.document_id == document_id)
        )
        result = await self.db.execute(stmt)
        return int(result.scalar_one())
