"""
Chat domain models and schemas.

Request/response schemas for chat operations.

Dependencies: pydantic
System role: Chat API contracts
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from ragchat.boundary.db.models.chat_model import MessageRole
from ragchat.models.citation import Citation


class ChatRequest(BaseModel):
    """Request schema for chat messages."""

    model_config = ConfigDict(populate_by_name=True)

    message: str = Field(description="User question or message")
    session_id: uuid.UUID | None = Field(
        default=None,
        alias="sessionId",
        description="Chat session to record the turn in",
    )
    user_id: str | None = Field(
        default=None,
        alias="userId",
        description="Owner of a session created by this request",
    )


class ChatMessageResponse(BaseModel):
    """Single chat message in history."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    role: MessageRole = Field(description="Message role: user or assistant")
    content: str = Field(description="Message content")
    citations: list[Citation] | None = None
    created_at: datetime


class ChatHistoryResponse(BaseModel):
    """Response schema for chat history."""

    session_id: uuid.UUID
    messages: list[ChatMessageResponse]
    total: int = Field(description="Total number of messages")
