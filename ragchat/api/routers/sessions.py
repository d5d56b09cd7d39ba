"""
Session API endpoints.

Routes:
- POST /sessions - Create (or touch) a chat session
- GET /sessions?userId= - List a user's sessions
- GET /sessions/{session_id}/messages - Chat history in arrival order

Dependencies: ragchat.application.services.session_service
System role: Session HTTP API
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from ragchat.api.deps import get_session_service
from ragchat.application.services.session_service import SessionService
from ragchat.models.chat import ChatHistoryResponse, ChatMessageResponse
from ragchat.models.session import CreateSessionRequest, SessionListResponse, SessionResponse

router = APIRouter(prefix="/sessions", tags=["sessions"])


@router.post("", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
async def create_session(
    request: CreateSessionRequest | None = None,
    session_service: SessionService = Depends(get_session_service),
) -> SessionResponse:
    """
    Create a chat session.

    An existing sessionId is returned as is, with its activity time updated.
    """
    request = request or CreateSessionRequest()
    session = await session_service.create_session(
        user_id=request.user_id,
        session_id=request.session_id,
    )
    return SessionResponse.model_validate(session)


@router.get("", response_model=SessionListResponse)
async def list_sessions(
    user_id: str | None = Query(default=None, alias="userId"),
    session_service: SessionService = Depends(get_session_service),
) -> SessionListResponse:
    """List sessions of a user, most recently active first."""
    sessions = await session_service.list_sessions(user_id)
    return SessionListResponse(
        sessions=[SessionResponse.model_validate(s) for s in sessions],
        total=len(sessions),
    )


@router.get("/{session_id}/messages", response_model=ChatHistoryResponse)
async def get_session_messages(
    session_id: UUID,
    session_service: SessionService = Depends(get_session_service),
) -> ChatHistoryResponse:
    """
    Get the chat history of a session.

    Raises:
        SessionNotFoundError (404): No such session
    """
    messages = await session_service.get_history(session_id)
    return ChatHistoryResponse(
        session_id=session_id,
        messages=[ChatMessageResponse.model_validate(m) for m in messages],
        total=len(messages),
    )
