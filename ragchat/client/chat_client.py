"""
Python client for the chat API.

Posts a question, reads the streamed body through the citation
demultiplexer and resolves inline [n] references.

Dependencies: httpx, ragchat.core.streaming
System role: Consumer of the chat stream wire format
"""

import logging
from collections.abc import AsyncIterator, Callable
from dataclasses import dataclass, field
from uuid import UUID

import httpx

from ragchat.core.streaming import (
    AnswerSegment,
    CitationStreamDemultiplexer,
    resolve_citations,
)
from ragchat.models.citation import Citation

logger = logging.getLogger(__name__)

CHAT_PATH = "/api/v1/chat"


@dataclass
class ChatAnswer:
    """Complete answer of one chat request."""

    answer: str
    citations: list[Citation] = field(default_factory=list)
    segments: list[AnswerSegment] = field(default_factory=list)
    envelope_error: str | None = None


class ChatClient:
    """Async client for the chat endpoint."""

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 120.0,
    ) -> None:
        """
        Initialize chat client.

        Args:
            base_url: API base URL
            http_client: Shared client (not closed by this class); a client
                per request is created when None
            timeout: Request timeout in seconds for per-request clients
        """
        self.base_url = base_url.rstrip("/")
        self._http_client = http_client
        self.timeout = timeout

    def _payload(self, message: str, session_id: UUID | str | None, user_id: str | None) -> dict:
        payload: dict = {"message": message}
        if session_id is not None:
            payload["sessionId"] = str(session_id)
        if user_id is not None:
            payload["userId"] = user_id
        return payload

    async def _stream_body(self, client: httpx.AsyncClient, payload: dict) -> AsyncIterator[bytes]:
        async with client.stream("POST", f"{self.base_url}{CHAT_PATH}", json=payload) as response:
            if response.is_error:
                await response.aread()
                logger.error(
                    f"{__name__}:ask - Chat request failed",
                    extra={"status_code": response.status_code, "body": response.text[:500]},
                )
                response.raise_for_status()
            async for data in response.aiter_bytes():
                yield data

    async def ask(
        self,
        message: str,
        session_id: UUID | str | None = None,
        user_id: str | None = None,
        on_text: Callable[[str], None] | None = None,
    ) -> ChatAnswer:
        """
        Ask a question and wait for the complete answer.

        Args:
            message: User question
            session_id: Session to record the turn in
            user_id: Owner of a newly created session
            on_text: Called with each piece of answer text as it becomes renderable

        Returns:
            ChatAnswer: Answer text, citations and resolved segments

        Raises:
            httpx.HTTPStatusError: Error status from the API (400, 5xx)
            httpx.HTTPError: Transport failure
        """
        demultiplexer = CitationStreamDemultiplexer()
        parts: list[str] = []

        def emit(text: str) -> None:
            if text:
                parts.append(text)
                if on_text is not None:
                    on_text(text)

        payload = self._payload(message, session_id, user_id)
        if self._http_client is not None:
            async for data in self._stream_body(self._http_client, payload):
                emit(demultiplexer.feed(data))
        else:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                async for data in self._stream_body(client, payload):
                    emit(demultiplexer.feed(data))
        emit(demultiplexer.close())

        answer = "".join(parts)
        logger.info(
            f"{__name__}:ask - Answer received",
            extra={"answer_length": len(answer), "citation_count": len(demultiplexer.citations)},
        )
        return ChatAnswer(
            answer=answer,
            citations=demultiplexer.citations,
            segments=resolve_citations(answer, demultiplexer.citations),
            envelope_error=demultiplexer.envelope_error,
        )
