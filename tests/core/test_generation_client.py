"""
Test suite for GenerationClient.

Covers fragment streaming, content normalization, retry before the first
fragment only, error mapping and closing the provider stream on early exit.

System role: Verification of the generation provider boundary
"""

import asyncio

import pytest
from langchain_core.language_models import GenericFakeChatModel
from langchain_core.messages import AIMessage, AIMessageChunk, HumanMessage
from langchain_google_genai._common import GoogleGenerativeAIError

from ragchat.configs.providers import ProviderSettings
from ragchat.core.exceptions import ProviderError, ProviderUnavailable
from ragchat.core.providers.generation_client import GenerationClient, chunk_text

PROMPT = [HumanMessage(content="question")]


class ScriptedChatModel:
    """Chat model double: fails a number of times, then streams chunks."""

    def __init__(
        self,
        chunks: list,
        failures_before_first: int = 0,
        error: BaseException | None = None,
        fail_after: int | None = None,
        delay: float = 0.0,
    ) -> None:
        self.chunks = chunks
        self.failures_before_first = failures_before_first
        self.error = error or ConnectionError("connection reset")
        self.fail_after = fail_after
        self.delay = delay
        self.calls = 0
        self.closed = 0

    def astream(self, messages):
        self.calls += 1
        return self._stream()

    async def _stream(self):
        try:
            if self.failures_before_first > 0:
                self.failures_before_first -= 1
                raise self.error
            for index, content in enumerate(self.chunks):
                if self.fail_after is not None and index == self.fail_after:
                    raise self.error
                if self.delay:
                    await asyncio.sleep(self.delay)
                yield AIMessageChunk(content=content)
        finally:
            self.closed += 1


def make_client(model, **kwargs) -> GenerationClient:
    defaults = {
        "request_timeout": 1.0,
        "max_retries": 3,
        "retry_initial_wait": 0.0,
        "retry_max_wait": 0.0,
    }
    defaults.update(kwargs)
    return GenerationClient(model, **defaults)


async def collect(client: GenerationClient) -> list[str]:
    return [fragment async for fragment in client.astream(PROMPT)]


class TestChunkText:
    """Test suite for chunk_text()."""

    def test_chunk_text_should_pass_strings_through(self) -> None:
        assert chunk_text("abc") == "abc"

    def test_chunk_text_should_join_content_parts(self) -> None:
        parts = [{"type": "text", "text": "Hello "}, "world", {"type": "image"}]

        assert chunk_text(parts) == "Hello world"

    def test_chunk_text_should_return_empty_for_none(self) -> None:
        assert chunk_text(None) == ""


class TestGenerationClientStream:
    """Test suite for astream()."""

    @pytest.mark.asyncio
    async def test_astream_should_yield_fake_model_fragments(self) -> None:
        # Arrange
        model = GenericFakeChatModel(messages=iter([AIMessage(content="Paris is the capital [1].")]))
        client = make_client(model)

        # Act
        fragments = await collect(client)

        # Assert
        assert len(fragments) > 1
        assert "".join(fragments) == "Paris is the capital [1]."

    @pytest.mark.asyncio
    async def test_astream_should_skip_empty_chunks(self) -> None:
        model = ScriptedChatModel(["a", "", "b"])

        assert await collect(make_client(model)) == ["a", "b"]

    @pytest.mark.asyncio
    async def test_astream_should_retry_transient_failure_before_first_fragment(self) -> None:
        # Arrange
        model = ScriptedChatModel(["ok"], failures_before_first=2)

        # Act
        fragments = await collect(make_client(model))

        # Assert
        assert fragments == ["ok"]
        assert model.calls == 3

    @pytest.mark.asyncio
    async def test_astream_should_raise_unavailable_when_retries_exhausted(self) -> None:
        model = ScriptedChatModel(["never"], failures_before_first=5)

        with pytest.raises(ProviderUnavailable):
            await collect(make_client(model, max_retries=2))
        assert model.calls == 2

    @pytest.mark.asyncio
    async def test_astream_should_retry_sdk_error_wrapping_connection_failure(self) -> None:
        # Arrange
        error = GoogleGenerativeAIError("Error generating content: connection refused")
        error.__cause__ = ConnectionError("connection refused")
        model = ScriptedChatModel(["never"], failures_before_first=5, error=error)

        # Act & Assert
        with pytest.raises(ProviderUnavailable):
            await collect(make_client(model, max_retries=3))
        assert model.calls == 3

    @pytest.mark.asyncio
    async def test_astream_should_not_retry_after_first_fragment(self) -> None:
        # Arrange
        model = ScriptedChatModel(["partial", "more"], fail_after=1, error=RuntimeError("boom"))
        client = make_client(model)
        received = []

        # Act
        with pytest.raises(ProviderError):
            async for fragment in client.astream(PROMPT):
                received.append(fragment)

        # Assert
        assert received == ["partial"]
        assert model.calls == 1

    @pytest.mark.asyncio
    async def test_astream_should_bound_each_fragment_by_timeout(self) -> None:
        model = ScriptedChatModel(["slow"], delay=1.0)

        with pytest.raises(ProviderUnavailable):
            await collect(make_client(model, request_timeout=0.01, max_retries=1))

    @pytest.mark.asyncio
    async def test_aclose_should_close_provider_stream(self) -> None:
        # Arrange
        model = ScriptedChatModel(["one", "two", "three"])
        stream = make_client(model).astream(PROMPT)

        # Act
        first = await stream.__anext__()
        await stream.aclose()

        # Assert
        assert first == "one"
        assert model.closed == 1


class TestGenerationClientFromSettings:
    """Test suite for from_settings()."""

    def test_from_settings_should_fail_fast_without_api_key(self) -> None:
        with pytest.raises(ProviderUnavailable) as exc_info:
            GenerationClient.from_settings(ProviderSettings(api_key=None))

        assert exc_info.value.details["provider"] == "generation"
