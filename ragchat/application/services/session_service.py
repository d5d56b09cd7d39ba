"""
Session service.

Chat session creation, listing and history lookup.

Dependencies: sqlalchemy, ragchat.boundary.db
System role: Session management orchestration
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ragchat.boundary.db.CRUD.chat_crud import chat_crud
from ragchat.boundary.db.models.chat_model import ChatMessageModel, ChatSessionModel
from ragchat.configs.chat import ChatSettings
from ragchat.core.exceptions import SessionNotFoundError, StorageError


class SessionService:
    """Chat session management."""

    def __init__(self, db: AsyncSession, settings: ChatSettings | None = None) -> None:
        self.db = db
        self.settings = settings or ChatSettings()

    async def create_session(
        self,
        user_id: str | None = None,
        session_id: UUID | None = None,
    ) -> ChatSessionModel:
        """
        Create a session, or touch an existing one with the same id.

        Args:
            user_id: Owner (settings default when None)
            session_id: Client-chosen id

        Returns:
            ChatSessionModel: Created or existing session

        Raises:
            StorageError: Session could not be stored
        """
        try:
            session = await chat_crud.create_session(
                self.db,
                user_id=user_id or self.settings.default_user_id,
                session_id=session_id,
            )
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise StorageError(f"Failed to create session: {e}", operation="create_session") from e
        return session

    async def list_sessions(self, user_id: str | None = None) -> Sequence[ChatSessionModel]:
        """List a user's sessions, most recently active first."""
        return await chat_crud.get_sessions_for_user(
            self.db, user_id or self.settings.default_user_id
        )

    async def get_history(self, session_id: UUID) -> Sequence[ChatMessageModel]:
        """
        Get a session's messages in arrival order.

        Raises:
            SessionNotFoundError: No such session
        """
        if not await chat_crud.exists(self.db, session_id):
            raise SessionNotFoundError(str(session_id))
        return await chat_crud.get_messages(self.db, session_id)
