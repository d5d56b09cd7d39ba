"""
Vector store boundary.

Exports: SQLVectorStore, ChunkRecord, VectorSearchResult
"""

from ragchat.boundary.vdb.sql_vector_store import SQLVectorStore, cosine_similarities
from ragchat.boundary.vdb.vector_schemas import ChunkRecord, VectorSearchResult

__all__ = [
    "SQLVectorStore",
    "ChunkRecord",
    "VectorSearchResult",
    "cosine_similarities",
]
