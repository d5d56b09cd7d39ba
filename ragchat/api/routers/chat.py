"""
Chat API endpoint.

Routes:
- POST /chat - Ask a question; streams the citation envelope, then the answer

Dependencies: ragchat.application.services.chat_service
System role: Chat messaging HTTP API with streaming
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from ragchat.api.deps import get_chat_service
from ragchat.application.services.chat_service import ChatService
from ragchat.models.chat import ChatRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chat", tags=["chat"])

STREAM_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
}


@router.post("")
async def chat(
    request: ChatRequest,
    chat_service: ChatService = Depends(get_chat_service),
) -> StreamingResponse:
    """
    Answer a question from the uploaded documents.

    Flow:
    1. Validate message, upsert session, retrieve context, store user message
    2. Stream "__CITATIONS__[...]__END_CITATIONS__" followed by answer text

    Errors in step 1 produce a JSON error response (400, 502, 503, 500);
    once streaming has started the body is the only channel.

    Args:
        request: ChatRequest with message and optional sessionId/userId
        chat_service: Injected ChatService

    Returns:
        StreamingResponse: text/plain body with the framed answer
    """
    turn = await chat_service.prepare_turn(
        message=request.message,
        session_id=request.session_id,
        user_id=request.user_id,
    )

    logger.info(
        "Streaming chat response",
        extra={
            "session_id": str(request.session_id) if request.session_id else None,
            "citation_count": len(turn.retrieval.citations),
        },
    )
    return StreamingResponse(
        chat_service.stream_turn(turn),
        media_type="text/plain; charset=utf-8",
        headers=STREAM_HEADERS,
    )
