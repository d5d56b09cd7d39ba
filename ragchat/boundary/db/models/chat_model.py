"""
Chat session and message ORM models.

A session groups the messages of one conversation; messages are appended
in arrival order and never updated.

Dependencies: sqlalchemy, ragchat.boundary.db.base
System role: Chat history persistence
"""

import enum
import uuid
from datetime import datetime

from sqlalchemy import JSON, DateTime, Enum, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ragchat.boundary.db.base import Base, TimestampMixin, UUIDMixin, utc_now


class MessageRole(str, enum.Enum):
    """Author of a chat message."""

    USER = "user"
    ASSISTANT = "assistant"


class ChatSessionModel(Base, UUIDMixin, TimestampMixin):
    """
    Chat session ORM model.

    Attributes:
        id: UUID primary key (client supplied or auto-generated)
        user_id: Owner reference
        created_at: Session creation timestamp (UTC)
        updated_at: Last activity timestamp (UTC)

    Relationships:
        messages: ChatMessageModel rows in arrival order (cascade delete)
    """

    __tablename__ = "chat_sessions"

    user_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)

    # Relationships
    messages = relationship(
        "ChatMessageModel",
        back_populates="session",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="ChatMessageModel.id",
    )


class ChatMessageModel(Base):
    """
    Chat message ORM model.

    Attributes:
        id: Auto-increment primary key (arrival order)
        session_id: Foreign key to chat_sessions.id (ON DELETE CASCADE)
        role: "user" or "assistant" (CHECK constraint)
        content: Message text
        citations: Citation list for assistant messages, None for user messages
        created_at: Insert timestamp (UTC)
    """

    __tablename__ = "chat_messages"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    session_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("chat_sessions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    role: Mapped[MessageRole] = mapped_column(
        Enum(
            MessageRole,
            native_enum=False,
            create_constraint=True,
            name="ck_chat_messages_role",
            length=20,
            values_callable=lambda roles: [r.value for r in roles],
        ),
        nullable=False,
    )

    content: Mapped[str] = mapped_column(Text, nullable=False)

    citations: Mapped[list[dict] | None] = mapped_column(JSON, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
    )

    # Relationships
    session = relationship("ChatSessionModel", back_populates="messages")
