"""
Generation client.

Streams answer text fragments from a LangChain chat model. Retries only
while opening the stream (before the first fragment); once text has been
produced, failures end the stream with an error.

Dependencies: langchain_core, langchain_google_genai, tenacity
System role: Generation provider boundary
"""

import asyncio
import logging
from collections.abc import AsyncGenerator, AsyncIterator, Sequence
from typing import Any

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import BaseMessage

from ragchat.configs.providers import ProviderSettings
from ragchat.core.exceptions import ProviderError, ProviderUnavailable, RagChatException
from ragchat.core.providers.retry_policy import (
    TRANSIENT_ERRORS,
    build_retrying,
    find_transient_error,
)

logger = logging.getLogger(__name__)

PROVIDER_NAME = "generation"


def chunk_text(content: Any) -> str:
    """
    Normalize message chunk content to text.

    Handles both plain string content and lists of content parts.

    Args:
        content: AIMessageChunk.content

    Returns:
        str: Concatenated text
    """
    if isinstance(content, list):
        return "".join(
            item if isinstance(item, str)
            else (item.get("text", "") if isinstance(item, dict) else str(item))
            for item in content
        )
    return str(content) if content else ""


async def _close(stream: AsyncIterator) -> None:
    aclose = getattr(stream, "aclose", None)
    if aclose is not None:
        await aclose()


class GenerationClient:
    """Chat model wrapper yielding answer fragments in arrival order."""

    def __init__(
        self,
        model: BaseChatModel,
        request_timeout: float = 60.0,
        max_retries: int = 3,
        retry_initial_wait: float = 1.0,
        retry_max_wait: float = 10.0,
        transient_errors: tuple[type[BaseException], ...] = TRANSIENT_ERRORS,
    ) -> None:
        """
        Initialize generation client.

        Args:
            model: LangChain chat model
            request_timeout: Upper bound in seconds for the first and each following fragment
            max_retries: Total attempts for transient failures while opening the stream
            retry_initial_wait: First backoff in seconds
            retry_max_wait: Backoff ceiling in seconds
            transient_errors: Exception types treated as transient
        """
        if max_retries < 1:
            raise ValueError("max_retries must be at least 1")
        self._model = model
        self._request_timeout = request_timeout
        self._max_retries = max_retries
        self._retry_initial_wait = retry_initial_wait
        self._retry_max_wait = retry_max_wait
        self._transient_errors = transient_errors

    @classmethod
    def from_settings(cls, settings: ProviderSettings) -> "GenerationClient":
        """
        Build a client backed by ChatGoogleGenerativeAI.

        Args:
            settings: Provider settings

        Returns:
            GenerationClient: Configured client

        Raises:
            ProviderUnavailable: API key missing or provider construction failed
        """
        if not settings.is_configured:
            raise ProviderUnavailable(
                "Google API key not configured. Set GOOGLE_API_KEY in the environment or .env",
                provider=PROVIDER_NAME,
            )

        from langchain_google_genai import ChatGoogleGenerativeAI

        try:
            model = ChatGoogleGenerativeAI(
                model=settings.chat_model,
                temperature=settings.temperature,
                max_output_tokens=settings.max_output_tokens,
                google_api_key=settings.api_key,
            )
        except Exception as e:
            raise ProviderUnavailable(
                f"Failed to initialize generation provider: {e}",
                provider=PROVIDER_NAME,
            ) from e

        return cls(
            model=model,
            request_timeout=settings.request_timeout,
            max_retries=settings.max_retries,
            retry_initial_wait=settings.retry_initial_wait,
            retry_max_wait=settings.retry_max_wait,
        )

    async def _next_fragment(self, stream: AsyncIterator) -> Any:
        return await asyncio.wait_for(anext(stream), timeout=self._request_timeout)

    async def _open_stream(
        self,
        messages: Sequence[BaseMessage],
    ) -> tuple[AsyncIterator, Any | None]:
        """Start the provider stream and wait for its first chunk (retried)."""
        retrying = build_retrying(
            logger,
            f"{__name__}:astream",
            self._max_retries,
            self._retry_initial_wait,
            self._retry_max_wait,
            self._transient_errors,
        )
        async for attempt in retrying:
            with attempt:
                stream = self._model.astream(list(messages))
                try:
                    first = await self._next_fragment(stream)
                except StopAsyncIteration:
                    return stream, None
                except BaseException:
                    await _close(stream)
                    raise
                return stream, first
        raise ProviderError("Generation stream could not be opened", provider=PROVIDER_NAME)

    async def astream(self, messages: Sequence[BaseMessage]) -> AsyncGenerator[str, None]:
        """
        Stream answer text fragments.

        Closing this generator (for example on client disconnect) closes the
        provider stream.

        Args:
            messages: Prompt messages

        Yields:
            str: Non-empty text fragments in arrival order

        Raises:
            ProviderUnavailable: Provider unreachable or timing out
            ProviderError: Provider failure
        """
        stream = None
        fragment_count = 0
        try:
            stream, first = await self._open_stream(messages)
            chunk = first
            while chunk is not None:
                text = chunk_text(getattr(chunk, "content", chunk))
                if text:
                    fragment_count += 1
                    yield text
                try:
                    chunk = await self._next_fragment(stream)
                except StopAsyncIteration:
                    chunk = None
            logger.info(f"{__name__}:astream - Stream finished, fragments={fragment_count}")
        except RagChatException:
            raise
        except Exception as e:
            cause = find_transient_error(e, self._transient_errors)
            if cause is not None:
                logger.error(f"{__name__}:astream - Provider unavailable: {type(cause).__name__}: {cause}")
                raise ProviderUnavailable(
                    f"Generation provider unavailable: {type(cause).__name__}: {cause}",
                    provider=PROVIDER_NAME,
                    details={"fragments_streamed": fragment_count},
                ) from e
            logger.error(f"{__name__}:astream - Provider error: {type(e).__name__}: {e}")
            raise ProviderError(
                f"Generation failed: {type(e).__name__}: {e}",
                provider=PROVIDER_NAME,
                details={"fragments_streamed": fragment_count},
            ) from e
        finally:
            if stream is not None:
                await _close(stream)
