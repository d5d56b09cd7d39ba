"""
Provider clients for embeddings and answer generation.

Exports: EmbeddingClient, GenerationClient
"""

from ragchat.core.providers.embedding_client import EmbeddingClient
from ragchat.core.providers.generation_client import GenerationClient

__all__ = ["EmbeddingClient", "GenerationClient"]
