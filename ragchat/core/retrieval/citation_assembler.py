"""
Retrieval and citation assembly.

Embeds the question, fetches the most similar chunks and numbers them
1..k in similarity order. The same numbering labels the prompt context and
the citation list, so an [n] in the answer always points at citation n.

Dependencies: langchain_core, ragchat.core.providers, ragchat.boundary.vdb
System role: Retrieval stage of the chat turn
"""

import logging
from dataclasses import dataclass, field

from langchain_core.messages import BaseMessage

from ragchat.boundary.vdb.sql_vector_store import SQLVectorStore
from ragchat.boundary.vdb.vector_schemas import VectorSearchResult
from ragchat.core.providers.embedding_client import EmbeddingClient
from ragchat.core.retrieval.prompt import ANSWER_PROMPT, NO_CONTEXT_NOTICE
from ragchat.models.citation import Citation

logger = logging.getLogger(__name__)

DEFAULT_TOP_K = 5


@dataclass
class RetrievalResult:
    """Numbered context block and the matching citations."""

    context_block: str = ""
    citations: list[Citation] = field(default_factory=list)


def format_context_entry(number: int, result: VectorSearchResult) -> str:
    return f"[{number}] Document: {result.filename}\nContent: {result.content}"


def assemble(results: list[VectorSearchResult]) -> RetrievalResult:
    """
    Number search results and build the context block and citations.

    Args:
        results: Search results in similarity order

    Returns:
        RetrievalResult: Entries joined by blank lines, one citation per chunk
    """
    numbered = list(enumerate(results, start=1))
    return RetrievalResult(
        context_block="\n\n".join(format_context_entry(n, r) for n, r in numbered),
        citations=[
            Citation(id=n, filename=r.filename, content=r.content, similarity=r.similarity)
            for n, r in numbered
        ],
    )


class RetrievalService:
    """Question-to-context retrieval."""

    def __init__(
        self,
        embedding_client: EmbeddingClient,
        vector_store: SQLVectorStore,
    ) -> None:
        """
        Initialize retrieval service.

        Args:
            embedding_client: Client embedding the question
            vector_store: Store searched for similar chunks
        """
        self._embedding_client = embedding_client
        self._vector_store = vector_store

    async def retrieve(self, query: str, k: int = DEFAULT_TOP_K) -> RetrievalResult:
        """
        Retrieve the k chunks most similar to the query.

        Args:
            query: User question
            k: Maximum number of chunks

        Returns:
            RetrievalResult: Empty when no completed document matches

        Raises:
            ProviderUnavailable: Embedding provider unreachable
            ProviderError: Embedding provider failure
            ValidationError: k < 1
            StorageError: Search failed
        """
        query_embedding = await self._embedding_client.embed(query)
        results = await self._vector_store.search(query_embedding, k)

        logger.info(
            f"{__name__}:retrieve - Retrieved {len(results)} chunks",
            extra={"k": k, "top_similarity": results[0].similarity if results else None},
        )
        return assemble(results)


def build_prompt_messages(question: str, retrieval: RetrievalResult) -> list[BaseMessage]:
    """
    Render the answer prompt for a question and its retrieval result.

    Args:
        question: User question
        retrieval: Numbered context (may be empty)

    Returns:
        list[BaseMessage]: System message with context, human message with question
    """
    context = retrieval.context_block or NO_CONTEXT_NOTICE
    return ANSWER_PROMPT.format_messages(context=context, question=question)
