"""
Embedding client.

Turns text into fixed-length vectors through a LangChain Embeddings
provider. Used for chunk text at ingestion and query text at retrieval.

Dependencies: langchain_core, langchain_google_genai, tenacity
System role: Embedding provider boundary with validation and retry
"""

import asyncio
import logging
import math
from typing import Sequence

from langchain_core.embeddings import Embeddings

from ragchat.configs.providers import ProviderSettings
from ragchat.core.exceptions import ProviderError, ProviderUnavailable, RagChatException
from ragchat.core.providers.retry_policy import (
    TRANSIENT_ERRORS,
    build_retrying,
    find_transient_error,
)

logger = logging.getLogger(__name__)

PROVIDER_NAME = "embedding"


class EmbeddingClient:
    """
    Embedding provider wrapper enforcing dimension D.

    Transient failures are retried with bounded backoff and then reported as
    ProviderUnavailable; malformed responses are reported as ProviderError.
    """

    def __init__(
        self,
        embeddings: Embeddings,
        dimension: int,
        request_timeout: float = 60.0,
        max_retries: int = 3,
        retry_initial_wait: float = 1.0,
        retry_max_wait: float = 10.0,
        transient_errors: tuple[type[BaseException], ...] = TRANSIENT_ERRORS,
    ) -> None:
        """
        Initialize embedding client.

        Args:
            embeddings: LangChain embeddings implementation
            dimension: Required vector length D
            request_timeout: Upper bound in seconds for one provider call
            max_retries: Total attempts for transient failures
            retry_initial_wait: First backoff in seconds
            retry_max_wait: Backoff ceiling in seconds
            transient_errors: Exception types treated as transient

        Raises:
            ValueError: When dimension or max_retries is not positive
        """
        if dimension < 1:
            raise ValueError("dimension must be positive")
        if max_retries < 1:
            raise ValueError("max_retries must be at least 1")
        self._embeddings = embeddings
        self.dimension = dimension
        self._request_timeout = request_timeout
        self._max_retries = max_retries
        self._retry_initial_wait = retry_initial_wait
        self._retry_max_wait = retry_max_wait
        self._transient_errors = transient_errors

    @classmethod
    def from_settings(cls, settings: ProviderSettings) -> "EmbeddingClient":
        """
        Build a client backed by Google Generative AI embeddings.

        Args:
            settings: Provider settings

        Returns:
            EmbeddingClient: Configured client

        Raises:
            ProviderUnavailable: API key missing or provider construction failed
        """
        if not settings.is_configured:
            raise ProviderUnavailable(
                "Google API key not configured. Set GOOGLE_API_KEY in the environment or .env",
                provider=PROVIDER_NAME,
            )

        from ragchat.core.providers.embeddings_wrapper import FixedDimensionEmbeddings

        try:
            embeddings = FixedDimensionEmbeddings(
                model=settings.embedding_model,
                output_dimensionality=settings.embedding_dimension,
                google_api_key=settings.api_key,
            )
        except Exception as e:
            raise ProviderUnavailable(
                f"Failed to initialize embedding provider: {e}",
                provider=PROVIDER_NAME,
            ) from e

        return cls(
            embeddings=embeddings,
            dimension=settings.embedding_dimension,
            request_timeout=settings.request_timeout,
            max_retries=settings.max_retries,
            retry_initial_wait=settings.retry_initial_wait,
            retry_max_wait=settings.retry_max_wait,
        )

    async def embed(self, text: str) -> list[float]:
        """
        Embed one text.

        Args:
            text: Chunk or query text

        Returns:
            list[float]: Vector of exactly D floats

        Raises:
            ProviderUnavailable: Provider unreachable or timing out after retries
            ProviderError: Provider failure or malformed response
        """
        retrying = build_retrying(
            logger,
            f"{__name__}:embed",
            self._max_retries,
            self._retry_initial_wait,
            self._retry_max_wait,
            self._transient_errors,
        )
        try:
            async for attempt in retrying:
                with attempt:
                    vector = await asyncio.wait_for(
                        self._embeddings.aembed_query(text),
                        timeout=self._request_timeout,
                    )
        except RagChatException:
            raise
        except Exception as e:
            cause = find_transient_error(e, self._transient_errors)
            if cause is not None:
                logger.error(f"{__name__}:embed - Provider unavailable: {type(cause).__name__}: {cause}")
                raise ProviderUnavailable(
                    f"Embedding provider unavailable after {self._max_retries} attempts: "
                    f"{type(cause).__name__}: {cause}",
                    provider=PROVIDER_NAME,
                ) from e
            logger.error(f"{__name__}:embed - Provider error: {type(e).__name__}: {e}")
            raise ProviderError(
                f"Embedding request failed: {type(e).__name__}: {e}",
                provider=PROVIDER_NAME,
            ) from e

        return self._validate(vector)

    async def embed_many(self, texts: Sequence[str]) -> list[list[float]]:
        """
        Embed texts one at a time, failing on the first error.

        Args:
            texts: Texts to embed

        Returns:
            list[list[float]]: One vector per text, in order
        """
        return [await self.embed(text) for text in texts]

    def _validate(self, vector: object) -> list[float]:
        if not isinstance(vector, (list, tuple)):
            raise ProviderError(
                f"Embedding response is {type(vector).__name__}, expected a list of floats",
                provider=PROVIDER_NAME,
            )
        if len(vector) != self.dimension:
            raise ProviderError(
                f"Embedding has {len(vector)} components, expected {self.dimension}",
                provider=PROVIDER_NAME,
                details={"expected": self.dimension, "actual": len(vector)},
            )
        for value in vector:
            if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
                raise ProviderError(
                    "Embedding contains a non-numeric or non-finite component",
                    provider=PROVIDER_NAME,
                )
        return [float(value) for value in vector]
