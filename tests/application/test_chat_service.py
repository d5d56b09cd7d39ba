"""
Test suite for ChatService.

Runs chat turns against the in-memory database with real retrieval and a
scripted generation client: framing, message persistence, partial answer
discard and error propagation.

System role: Verification of chat service orchestration layer
"""

import uuid
from unittest.mock import AsyncMock

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from conftest import TEST_DIMENSION, seed_document
from ragchat.application.services.chat_service import ChatService
from ragchat.boundary.db.CRUD.chat_crud import chat_crud
from ragchat.boundary.db.models.chat_model import ChatMessageModel, MessageRole
from ragchat.boundary.vdb.sql_vector_store import SQLVectorStore
from ragchat.configs.chat import ChatSettings
from ragchat.core.exceptions import ProviderError, StorageError, ValidationError
from ragchat.core.retrieval import RetrievalService
from ragchat.core.streaming import BEGIN_MARKER, END_MARKER, demultiplex

QUESTION = "What does the handbook say about leave?"


class ScriptedGenerationClient:
    """Generation client double yielding fixed fragments."""

    def __init__(self, fragments: list[str], error: Exception | None = None) -> None:
        self.fragments = fragments
        self.error = error
        self.prompts = []
        self.closed = False

    async def astream(self, messages):
        self.prompts.append(messages)
        try:
            for fragment in self.fragments:
                yield fragment
            if self.error is not None:
                raise self.error
        finally:
            self.closed = True


@pytest.fixture
async def seeded_db(test_async_db, fake_embeddings):
    """Database with one completed document matching QUESTION."""
    await seed_document(
        test_async_db,
        original_name="handbook.pdf",
        chunks=[("Employees get 25 days of leave.", fake_embeddings.embed_query(QUESTION))],
    )
    return test_async_db


def build_service(db, embedding_client, generation_client, session_factory=None) -> ChatService:
    retrieval = RetrievalService(embedding_client, SQLVectorStore(db, TEST_DIMENSION))
    return ChatService(
        db=db,
        retrieval_service=retrieval,
        generation_client=generation_client,
        settings=ChatSettings(top_k=5, max_message_length=100),
        session_factory=session_factory,
    )


async def drain(stream) -> str:
    return "".join([piece async for piece in stream])


async def message_count(db) -> int:
    result = await db.execute(select(func.count()).select_from(ChatMessageModel))
    return int(result.scalar_one())


class TestChatServiceValidation:
    """Test suite for validate_message()."""

    @pytest.mark.parametrize("message", ["", "   ", "\n\t"])
    def test_validate_message_should_reject_blank(self, test_async_db, embedding_client, message) -> None:
        service = build_service(test_async_db, embedding_client, ScriptedGenerationClient([]))

        with pytest.raises(ValidationError):
            service.validate_message(message)

    def test_validate_message_should_reject_too_long(self, test_async_db, embedding_client) -> None:
        service = build_service(test_async_db, embedding_client, ScriptedGenerationClient([]))

        with pytest.raises(ValidationError):
            service.validate_message("x" * 101)

    @pytest.mark.asyncio
    async def test_prepare_turn_should_store_nothing_for_invalid_message(
        self, test_async_db, embedding_client
    ) -> None:
        service = build_service(test_async_db, embedding_client, ScriptedGenerationClient([]))

        with pytest.raises(ValidationError):
            await service.prepare_turn("  ", session_id=uuid.uuid4())

        assert await message_count(test_async_db) == 0


class TestChatServiceStreamTurn:
    """Test suite for prepare_turn() followed by stream_turn()."""

    @pytest.mark.asyncio
    async def test_stream_turn_should_frame_citations_before_answer(
        self, seeded_db, embedding_client
    ) -> None:
        # Arrange
        generation = ScriptedGenerationClient(["You get ", "25 days [1]."])
        service = build_service(seeded_db, embedding_client, generation)

        # Act
        turn = await service.prepare_turn(QUESTION)
        body = await drain(service.stream_turn(turn))

        # Assert
        assert body.startswith(BEGIN_MARKER)
        assert body.endswith(f"{END_MARKER}You get 25 days [1].")
        parsed = demultiplex(body)
        assert parsed.answer == "You get 25 days [1]."
        assert [c.filename for c in parsed.citations] == ["handbook.pdf"]
        assert parsed.citations[0].id == 1

    @pytest.mark.asyncio
    async def test_stream_turn_should_persist_both_messages_with_session(
        self, seeded_db, embedding_client, test_session_factory
    ) -> None:
        # Arrange
        session_id = uuid.uuid4()
        generation = ScriptedGenerationClient(["Answer ", "[1]"])
        service = build_service(seeded_db, embedding_client, generation, test_session_factory)

        # Act
        turn = await service.prepare_turn(QUESTION, session_id=session_id, user_id="alice")
        await drain(service.stream_turn(turn))

        # Assert
        messages = await chat_crud.get_messages(seeded_db, session_id)
        assert [(m.role, m.content) for m in messages] == [
            (MessageRole.USER, QUESTION),
            (MessageRole.ASSISTANT, "Answer [1]"),
        ]
        assert messages[0].citations is None
        assert messages[1].citations[0]["filename"] == "handbook.pdf"
        assert messages[1].citations[0]["id"] == 1
        sessions = await chat_crud.get_sessions_for_user(seeded_db, "alice")
        assert [s.id for s in sessions] == [session_id]

    @pytest.mark.asyncio
    async def test_stream_turn_should_not_persist_without_session(
        self, seeded_db, embedding_client
    ) -> None:
        service = build_service(seeded_db, embedding_client, ScriptedGenerationClient(["Hi"]))

        turn = await service.prepare_turn(QUESTION)
        await drain(service.stream_turn(turn))

        assert await message_count(seeded_db) == 0

    @pytest.mark.asyncio
    async def test_stream_turn_should_discard_partial_answer_on_early_close(
        self, seeded_db, embedding_client
    ) -> None:
        # Arrange
        session_id = uuid.uuid4()
        generation = ScriptedGenerationClient(["Part one", " part two", " part three"])
        service = build_service(seeded_db, embedding_client, generation)
        turn = await service.prepare_turn(QUESTION, session_id=session_id)

        # Act
        stream = service.stream_turn(turn)
        envelope = await stream.__anext__()
        first = await stream.__anext__()
        await stream.aclose()

        # Assert
        assert envelope.startswith(BEGIN_MARKER)
        assert first == "Part one"
        assert generation.closed is True
        messages = await chat_crud.get_messages(seeded_db, session_id)
        assert [m.role for m in messages] == [MessageRole.USER]

    @pytest.mark.asyncio
    async def test_stream_turn_should_propagate_provider_failure_and_discard_answer(
        self, seeded_db, embedding_client
    ) -> None:
        # Arrange
        session_id = uuid.uuid4()
        generation = ScriptedGenerationClient(
            ["partial"], error=ProviderError("model crashed", provider="generation")
        )
        service = build_service(seeded_db, embedding_client, generation)
        turn = await service.prepare_turn(QUESTION, session_id=session_id)
        received = []

        # Act
        with pytest.raises(ProviderError):
            async for piece in service.stream_turn(turn):
                received.append(piece)

        # Assert
        assert received[-1] == "partial"
        messages = await chat_crud.get_messages(seeded_db, session_id)
        assert [m.role for m in messages] == [MessageRole.USER]

    @pytest.mark.asyncio
    async def test_stream_turn_should_skip_empty_answer(self, seeded_db, embedding_client) -> None:
        session_id = uuid.uuid4()
        service = build_service(seeded_db, embedding_client, ScriptedGenerationClient([]))

        turn = await service.prepare_turn(QUESTION, session_id=session_id)
        body = await drain(service.stream_turn(turn))

        assert body.endswith(END_MARKER)
        assert await message_count(seeded_db) == 1

    @pytest.mark.asyncio
    async def test_prepare_turn_should_use_notice_when_nothing_matches(
        self, test_async_db, embedding_client
    ) -> None:
        service = build_service(test_async_db, embedding_client, ScriptedGenerationClient(["x"]))

        turn = await service.prepare_turn(QUESTION)

        assert turn.retrieval.citations == []
        assert "No relevant context" in turn.messages[0].content

    @pytest.mark.asyncio
    async def test_prepare_turn_should_raise_storage_error_when_message_write_fails(
        self, seeded_db, embedding_client, monkeypatch
    ) -> None:
        # Arrange
        monkeypatch.setattr(
            chat_crud,
            "add_message",
            AsyncMock(side_effect=OperationalError("INSERT", {}, Exception("locked"))),
        )
        service = build_service(seeded_db, embedding_client, ScriptedGenerationClient(["x"]))

        # Act / Assert
        with pytest.raises(StorageError):
            await service.prepare_turn(QUESTION, session_id=uuid.uuid4())
