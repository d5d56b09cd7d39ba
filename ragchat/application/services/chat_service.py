"""
Chat service for document-grounded Q&A.

Orchestrates one chat turn: session upsert, retrieval, user message
persistence, streamed generation and assistant message persistence.
Everything that can fail before the first byte runs in prepare_turn so the
HTTP layer can still answer with an error status.

Dependencies: langchain_core, sqlalchemy, ragchat.core, ragchat.boundary.db
System role: Chat service orchestration layer
"""

import logging
from collections.abc import AsyncGenerator
from dataclasses import dataclass, field
from uuid import UUID

from langchain_core.messages import BaseMessage
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ragchat.boundary.db.CRUD.chat_crud import chat_crud
from ragchat.boundary.db.models.chat_model import MessageRole
from ragchat.configs.chat import ChatSettings
from ragchat.core.exceptions import StorageError, ValidationError
from ragchat.core.providers.generation_client import GenerationClient
from ragchat.core.retrieval import RetrievalResult, RetrievalService, build_prompt_messages
from ragchat.core.streaming.framer import frame_response

logger = logging.getLogger(__name__)


@dataclass
class ChatTurn:
    """A validated question with its retrieval result, ready to stream."""

    question: str
    session_id: UUID | None
    retrieval: RetrievalResult
    messages: list[BaseMessage] = field(default_factory=list)


class ChatService:
    """
    Chat service for single-turn retrieval-augmented answers.

    Messages are only recorded when the turn names a session. A partial
    answer (client disconnect or provider failure mid-stream) is discarded.
    """

    def __init__(
        self,
        db: AsyncSession,
        retrieval_service: RetrievalService,
        generation_client: GenerationClient,
        settings: ChatSettings | None = None,
        session_factory: async_sessionmaker[AsyncSession] | None = None,
    ) -> None:
        """
        Initialize chat service.

        Args:
            db: AsyncSession for the request
            retrieval_service: Question-to-context retrieval
            generation_client: Streaming chat model client
            settings: Chat settings (uses defaults if None)
            session_factory: Factory for the session that stores the answer
                after streaming (uses db if None)
        """
        self.db = db
        self.retrieval_service = retrieval_service
        self.generation_client = generation_client
        self.settings = settings or ChatSettings()
        self._session_factory = session_factory

    def validate_message(self, message: str) -> str:
        """
        Check a user message.

        Args:
            message: Raw user message

        Returns:
            str: The message unchanged

        Raises:
            ValidationError: Empty, blank or too long
        """
        if not isinstance(message, str) or not message.strip():
            raise ValidationError("Message is required", field="message")
        if len(message) > self.settings.max_message_length:
            raise ValidationError(
                f"Message exceeds {self.settings.max_message_length} characters",
                field="message",
            )
        return message

    async def prepare_turn(
        self,
        message: str,
        session_id: UUID | None = None,
        user_id: str | None = None,
    ) -> ChatTurn:
        """
        Run every step that precedes streaming.

        Flow:
        1. Validate message
        2. Create or touch the session (when session_id is given)
        3. Retrieve numbered context and citations
        4. Store the user message (when session_id is given)

        Args:
            message: User question
            session_id: Session to record the turn in
            user_id: Owner for a newly created session

        Returns:
            ChatTurn: Prompt messages and citations for stream_turn

        Raises:
            ValidationError: Invalid message
            ProviderUnavailable: Embedding provider unreachable
            ProviderError: Embedding provider failure
            StorageError: Session, message or chunk storage failed
        """
        self.validate_message(message)

        if session_id is not None:
            await self._store(
                "prepare_turn",
                chat_crud.create_session,
                self.db,
                user_id=user_id or self.settings.default_user_id,
                session_id=session_id,
            )

        retrieval = await self.retrieval_service.retrieve(message, k=self.settings.top_k)

        if session_id is not None:
            await self._store(
                "prepare_turn",
                chat_crud.add_message,
                self.db,
                session_id=session_id,
                role=MessageRole.USER,
                content=message,
            )

        logger.info(
            f"{__name__}:prepare_turn - Turn prepared",
            extra={
                "session_id": str(session_id) if session_id else None,
                "citation_count": len(retrieval.citations),
            },
        )
        return ChatTurn(
            question=message,
            session_id=session_id,
            retrieval=retrieval,
            messages=build_prompt_messages(message, retrieval),
        )

    async def stream_turn(self, turn: ChatTurn) -> AsyncGenerator[str, None]:
        """
        Stream the framed response for a prepared turn.

        Yields the citation envelope, then answer fragments. The assistant
        message is stored only after the provider stream finished; closing
        this generator early closes the provider stream and stores nothing.

        Args:
            turn: Result of prepare_turn

        Yields:
            str: Envelope, then answer fragments

        Raises:
            ProviderUnavailable: Generation provider unreachable mid-stream
            ProviderError: Generation provider failure mid-stream
            StorageError: Assistant message could not be stored
        """
        answer_parts: list[str] = []
        fragments = self.generation_client.astream(turn.messages)

        async def recorded() -> AsyncGenerator[str, None]:
            async for fragment in fragments:
                answer_parts.append(fragment)
                yield fragment

        recorder = recorded()
        framed = frame_response(turn.retrieval.citations, recorder)
        completed = False
        try:
            async for piece in framed:
                yield piece
            completed = True
        finally:
            await framed.aclose()
            await recorder.aclose()
            await fragments.aclose()
            if not completed:
                logger.warning(
                    f"{__name__}:stream_turn - Stream ended early, partial answer discarded",
                    extra={"fragments": len(answer_parts)},
                )

        answer = "".join(answer_parts)
        logger.info(f"{__name__}:stream_turn - Stream complete, answer_len={len(answer)}")

        if turn.session_id is None:
            return
        if not answer:
            logger.warning(f"{__name__}:stream_turn - Empty answer, nothing stored")
            return
        await self._store_answer(turn, answer)

    async def _store_answer(self, turn: ChatTurn, answer: str) -> None:
        citations = [citation.model_dump() for citation in turn.retrieval.citations]
        if self._session_factory is None:
            await self._store(
                "stream_turn",
                chat_crud.add_message,
                self.db,
                session_id=turn.session_id,
                role=MessageRole.ASSISTANT,
                content=answer,
                citations=citations,
            )
            return
        async with self._session_factory() as db:
            await self._store(
                "stream_turn",
                chat_crud.add_message,
                db,
                session_id=turn.session_id,
                role=MessageRole.ASSISTANT,
                content=answer,
                citations=citations,
            )

    async def _store(self, operation: str, write, db: AsyncSession, **kwargs):
        """Run one chat CRUD write and commit it, mapping failures to StorageError."""
        try:
            result = await write(db, **kwargs)
            await db.commit()
            return result
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"{__name__}:{operation} - Chat storage failed: {type(e).__name__}: {e}")
            raise StorageError(f"Failed to store chat data: {e}", operation=operation) from e
