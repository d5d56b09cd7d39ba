"""
Chat history CRUD operations.

Session upsert and ordered message persistence for chat history.

Dependencies: sqlalchemy, ragchat.boundary.db.models
System role: Chat message persistence
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ragchat.boundary.db.base import utc_now
from ragchat.boundary.db.CRUD.base_crud import BaseCRUD
from ragchat.boundary.db.models.chat_model import (
    ChatMessageModel,
    ChatSessionModel,
    MessageRole,
)


class ChatCRUD(BaseCRUD[ChatSessionModel]):
    """
    CRUD operations for chat sessions and their messages.

    Messages are append-only; reads return them in arrival order.
    """

    def __init__(self) -> None:
        """Initialize ChatCRUD with ChatSessionModel."""
        super().__init__(ChatSessionModel)

    async def create_session(
        self,
        session: AsyncSession,
        user_id: str,
        session_id: UUID | None = None,
    ) -> ChatSessionModel:
        """
        Create a chat session, or touch it when the given id already exists.

        Args:
            session: Async database session
            user_id: Owner reference
            session_id: Optional client-supplied session UUID

        Returns:
            ChatSessionModel: Created or existing session
        """
        if session_id is not None:
            existing = await self.get_by_id(session, session_id)
            if existing is not None:
                existing.updated_at = utc_now()
                await session.flush()
                return existing
            return await self.create(session, id=session_id, user_id=user_id)
        return await self.create(session, user_id=user_id)

    async def get_sessions_for_user(
        self,
        session: AsyncSession,
        user_id: str,
    ) -> Sequence[ChatSessionModel]:
        """
        Retrieve a user's sessions, most recently active first.

        Args:
            session: Async database session
            user_id: Owner reference

        Returns:
            Sequence of ChatSessionModels
        """
        stmt = (
            select(ChatSessionModel)
            .where(ChatSessionModel.user_id == user_id)
            .order_by(ChatSessionModel.updated_at.desc())
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def add_message(
        self,
        session: AsyncSession,
        session_id: UUID,
        role: MessageRole,
        content: str,
        citations: list[dict] | None = None,
    ) -> ChatMessageModel:
        """
        Append a message to a session.

        Args:
            session: Async database session
            session_id: Parent session UUID
            role: Message author
            content: Message text
            citations: Citation payload for assistant messages

        Returns:
            ChatMessageModel: Stored message
        """
        message = ChatMessageModel(
            session_id=session_id,
            role=role,
            content=content,
            citations=citations,
        )
        session.add(message)
        await session.flush()
        await session.refresh(message)
        return message

    async def get_messages(
        self,
        session: AsyncSession,
        session_id: UUID,
        limit: int | None = None,
    ) -> Sequence[ChatMessageModel]:
        """
        Retrieve a session's messages in arrival order.

        Args:
            session: Async database session
            session_id: Session UUID
            limit: Keep only the most recent N messages (still oldest first)

        Returns:
            Sequence of ChatMessageModels
        """
        stmt = select(ChatMessageModel).where(ChatMessageModel.session_id == session_id)
        if limit is not None:
            stmt = stmt.order_by(ChatMessageModel.id.desc()).limit(limit)
            result = await session.execute(stmt)
            return list(reversed(result.scalars().all()))
        stmt = stmt.order_by(ChatMessageModel.id.asc())
        result = await session.execute(stmt)
        return result.scalars().all()


chat_crud = ChatCRUD()
