"""
Embedding task.

Embeds every chunk of a document and builds insert-ready records.
All-or-nothing: the first failure aborts the document.

Dependencies: ragchat.core.providers, ragchat.boundary.vdb
System role: Third stage of document ingestion pipeline
"""

from ragchat.boundary.vdb.vector_schemas import CHUNK_INDEX_KEY, ChunkRecord
from ragchat.core.providers.embedding_client import EmbeddingClient


class EmbeddingTask:
    """Generate embeddings for chunk texts."""

    def __init__(self, embedding_client: EmbeddingClient) -> None:
        """
        Initialize embedding task.

        Args:
            embedding_client: Client producing D-dimensional vectors
        """
        self._client = embedding_client

    async def embed(
        self,
        chunks: list[str],
        filename: str,
        mime_type: str,
    ) -> list[ChunkRecord]:
        """
        Embed chunks sequentially.

        Args:
            chunks: Chunk texts in document order
            filename: Original document name recorded in metadata
            mime_type: Document media type recorded in metadata

        Returns:
            list[ChunkRecord]: One record per chunk, same order

        Raises:
            ProviderUnavailable: Embedding provider unreachable
            ProviderError: Embedding provider failure or malformed vector
        """
        records = []
        for index, text in enumerate(chunks):
            embedding = await self._client.embed(text)
            records.append(
                ChunkRecord(
                    content=text,
                    embedding=embedding,
                    metadata={
                        CHUNK_INDEX_KEY: index,
                        "filename": filename,
                        "mimeType": mime_type,
                    },
                )
            )
        return records
