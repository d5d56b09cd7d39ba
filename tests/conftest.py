"""
Shared test fixtures and configuration for entire test suite.

Provides: In-memory async database, fake provider clients, document seeding helpers
Dependencies: pytest, pytest-asyncio, sqlalchemy, aiosqlite, langchain_core
System role: Test infrastructure and fixture management
"""

import uuid

import pytest
from langchain_core.embeddings import DeterministicFakeEmbedding
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from ragchat.boundary.db.base import Base
from ragchat.boundary.db.models import DocumentChunkModel, DocumentModel, DocumentStatus
from ragchat.core.providers.embedding_client import EmbeddingClient

TEST_DIMENSION = 8


@pytest.fixture
async def test_engine():
    """
    Create in-memory SQLite async engine with all tables.

    Yields:
        AsyncEngine: Engine shared by every session of the test (StaticPool)
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def test_session_factory(test_engine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the test engine."""
    return async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        autoflush=False,
        expire_on_commit=False,
    )


@pytest.fixture
async def test_async_db(test_session_factory):
    """
    Create a session on the in-memory database.

    Yields:
        AsyncSession: Test database session
    """
    async with test_session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def fake_embeddings() -> DeterministicFakeEmbedding:
    """Deterministic embeddings: same text, same vector."""
    return DeterministicFakeEmbedding(size=TEST_DIMENSION)


@pytest.fixture
def embedding_client(fake_embeddings: DeterministicFakeEmbedding) -> EmbeddingClient:
    """EmbeddingClient over fake embeddings, no retries."""
    return EmbeddingClient(
        embeddings=fake_embeddings,
        dimension=TEST_DIMENSION,
        request_timeout=5.0,
        max_retries=1,
    )


async def seed_document(
    db: AsyncSession,
    original_name: str = "notes.txt",
    status: DocumentStatus = DocumentStatus.COMPLETED,
    chunks: list[tuple[str, list[float]]] | None = None,
    mime_type: str = "text/plain",
) -> DocumentModel:
    """
    Insert a document and its chunks directly.

    Args:
        db: Session to write with (committed)
        original_name: Document name shown in citations
        status: Document status
        chunks: (content, embedding) pairs in insertion order
        mime_type: Declared media type

    Returns:
        DocumentModel: Stored document
    """
    document = DocumentModel(
        id=uuid.uuid4(),
        filename=f"1700000000000_{original_name}",
        original_name=original_name,
        mime_type=mime_type,
        size=100,
        uploaded_by="test-user",
        status=status,
        chunk_count=len(chunks or []),
    )
    db.add(document)
    await db.flush()
    for index, (content, embedding) in enumerate(chunks or []):
        db.add(
            DocumentChunkModel(
                document_id=document.id,
                content=content,
                embedding=embedding,
                chunk_metadata={"chunkIndex": index, "filename": original_name, "mimeType": mime_type},
            )
        )
    await db.commit()
    return document


def unit_vector(index: int, dimension: int = TEST_DIMENSION) -> list[float]:
    """Basis vector e_index."""
    vector = [0.0] * dimension
    vector[index] = 1.0
    return vector
