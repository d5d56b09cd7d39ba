"""
Test suite for SessionService.

System role: Verification of session management orchestration
"""

import uuid
from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import OperationalError

from ragchat.application.services.session_service import SessionService
from ragchat.boundary.db.CRUD.chat_crud import chat_crud
from ragchat.boundary.db.models.chat_model import MessageRole
from ragchat.configs.chat import ChatSettings
from ragchat.core.exceptions import SessionNotFoundError, StorageError


@pytest.fixture
def session_service(test_async_db) -> SessionService:
    """Session service on the test database."""
    return SessionService(test_async_db, settings=ChatSettings(default_user_id="default-user"))


class TestSessionService:
    """Test suite for SessionService."""

    @pytest.mark.asyncio
    async def test_create_session_should_default_user(self, session_service) -> None:
        session = await session_service.create_session()

        assert session.user_id == "default-user"

    @pytest.mark.asyncio
    async def test_create_session_should_be_idempotent_for_same_id(self, session_service) -> None:
        session_id = uuid.uuid4()

        first = await session_service.create_session("alice", session_id)
        second = await session_service.create_session("alice", session_id)

        assert first.id == second.id == session_id
        assert len(await session_service.list_sessions("alice")) == 1

    @pytest.mark.asyncio
    async def test_list_sessions_should_only_return_own_sessions(self, session_service) -> None:
        await session_service.create_session("alice")
        await session_service.create_session("bob")

        sessions = await session_service.list_sessions("bob")

        assert [s.user_id for s in sessions] == ["bob"]

    @pytest.mark.asyncio
    async def test_get_history_should_return_messages_in_order(
        self, session_service, test_async_db
    ) -> None:
        # Arrange
        session = await session_service.create_session("alice")
        await chat_crud.add_message(test_async_db, session.id, MessageRole.USER, "Hi")
        await chat_crud.add_message(test_async_db, session.id, MessageRole.ASSISTANT, "Hello")
        await test_async_db.commit()

        # Act
        history = await session_service.get_history(session.id)

        # Assert
        assert [m.content for m in history] == ["Hi", "Hello"]

    @pytest.mark.asyncio
    async def test_get_history_should_raise_for_unknown_session(self, session_service) -> None:
        with pytest.raises(SessionNotFoundError):
            await session_service.get_history(uuid.uuid4())

    @pytest.mark.asyncio
    async def test_create_session_should_map_database_failure(
        self, session_service, monkeypatch
    ) -> None:
        monkeypatch.setattr(
            chat_crud,
            "create_session",
            AsyncMock(side_effect=OperationalError("INSERT", {}, Exception("locked"))),
        )

        with pytest.raises(StorageError):
            await session_service.create_session("alice")
