"""
Test suite for ChatCRUD database operations.

Tests session upsert, per-user listing and ordered message storage.

System role: Verification of chat history persistence layer
"""

import uuid

import pytest

from ragchat.boundary.db.CRUD.chat_crud import ChatCRUD
from ragchat.boundary.db.models.chat_model import MessageRole


@pytest.fixture
def chat_crud() -> ChatCRUD:
    """Provide ChatCRUD instance for testing."""
    return ChatCRUD()


class TestChatCRUDCreateSession:
    """Test suite for create_session()."""

    @pytest.mark.asyncio
    async def test_create_session_should_use_client_supplied_id(self, chat_crud, test_async_db) -> None:
        session_id = uuid.uuid4()

        session = await chat_crud.create_session(test_async_db, user_id="u1", session_id=session_id)

        assert session.id == session_id
        assert session.user_id == "u1"

    @pytest.mark.asyncio
    async def test_create_session_should_generate_id_when_missing(
        self, chat_crud, test_async_db
    ) -> None:
        session = await chat_crud.create_session(test_async_db, user_id="u1")

        assert isinstance(session.id, uuid.UUID)

    @pytest.mark.asyncio
    async def test_create_session_should_return_existing_session(
        self, chat_crud, test_async_db
    ) -> None:
        # Arrange
        session_id = uuid.uuid4()
        first = await chat_crud.create_session(test_async_db, user_id="u1", session_id=session_id)
        await test_async_db.commit()

        # Act
        second = await chat_crud.create_session(test_async_db, user_id="other", session_id=session_id)
        await test_async_db.commit()

        # Assert
        assert second.id == first.id
        assert second.user_id == "u1"
        assert len(await chat_crud.get_sessions_for_user(test_async_db, "u1")) == 1


class TestChatCRUDSessionsForUser:
    """Test suite for get_sessions_for_user()."""

    @pytest.mark.asyncio
    async def test_get_sessions_for_user_should_filter_by_owner(
        self, chat_crud, test_async_db
    ) -> None:
        await chat_crud.create_session(test_async_db, user_id="alice")
        await chat_crud.create_session(test_async_db, user_id="alice")
        await chat_crud.create_session(test_async_db, user_id="bob")
        await test_async_db.commit()

        sessions = await chat_crud.get_sessions_for_user(test_async_db, "alice")

        assert len(sessions) == 2
        assert all(s.user_id == "alice" for s in sessions)


class TestChatCRUDMessages:
    """Test suite for add_message() and get_messages()."""

    @pytest.mark.asyncio
    async def test_get_messages_should_return_arrival_order(self, chat_crud, test_async_db) -> None:
        # Arrange
        session = await chat_crud.create_session(test_async_db, user_id="u1")
        await chat_crud.add_message(test_async_db, session.id, MessageRole.USER, "Question?")
        citations = [{"id": 1, "filename": "a.pdf", "content": "ctx", "similarity": 0.9}]
        await chat_crud.add_message(
            test_async_db, session.id, MessageRole.ASSISTANT, "Answer [1]", citations=citations
        )
        await test_async_db.commit()

        # Act
        messages = await chat_crud.get_messages(test_async_db, session.id)

        # Assert
        assert [m.role for m in messages] == [MessageRole.USER, MessageRole.ASSISTANT]
        assert messages[0].citations is None
        assert messages[1].citations == citations

    @pytest.mark.asyncio
    async def test_get_messages_should_keep_most_recent_when_limited(
        self, chat_crud, test_async_db
    ) -> None:
        session = await chat_crud.create_session(test_async_db, user_id="u1")
        for text in ["one", "two", "three"]:
            await chat_crud.add_message(test_async_db, session.id, MessageRole.USER, text)
        await test_async_db.commit()

        messages = await chat_crud.get_messages(test_async_db, session.id, limit=2)

        assert [m.content for m in messages] == ["two", "three"]

    @pytest.mark.asyncio
    async def test_exists_should_report_missing_session(self, chat_crud, test_async_db) -> None:
        assert await chat_crud.exists(test_async_db, uuid.uuid4()) is False
