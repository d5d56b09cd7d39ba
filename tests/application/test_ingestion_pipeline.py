"""
Test suite for IngestionPipeline.

Covers upload validation, the UPLOADING → PROCESSING → COMPLETED path and
every failure that must leave the document FAILED without chunks.

System role: Verification of document ingestion orchestration
"""

import uuid

import pytest
from langchain_core.embeddings import Embeddings

from conftest import TEST_DIMENSION
from ragchat.boundary.db.CRUD.document_crud import document_crud
from ragchat.boundary.db.models.document_model import DocumentStatus
from ragchat.boundary.vdb.sql_vector_store import SQLVectorStore
from ragchat.core.document_processing import DocumentPipelineSettings, IngestionPipeline
from ragchat.core.document_processing.pipeline import stored_filename
from ragchat.core.exceptions import DocumentNotFoundError, ValidationError
from ragchat.core.providers.embedding_client import EmbeddingClient

SAMPLE_TEXT = (
    "The first section describes the travel policy. Employees book flights in economy. "
    "The second section covers expenses. Receipts are required for every claim. "
    "The third section explains approvals. Managers approve requests within five days."
)


class FailingEmbeddings(Embeddings):
    """Embeddings double whose provider is always unreachable."""

    def embed_documents(self, texts):
        raise ConnectionError("provider down")

    def embed_query(self, text):
        raise ConnectionError("provider down")


@pytest.fixture
def pipeline_settings() -> DocumentPipelineSettings:
    """Small chunks so the sample text produces several of them."""
    return DocumentPipelineSettings(chunk_size=80, chunk_overlap=20, max_file_size=1024)


@pytest.fixture
def pipeline(test_async_db, embedding_client, pipeline_settings) -> IngestionPipeline:
    """Pipeline over the test database and fake embeddings."""
    return IngestionPipeline(test_async_db, embedding_client, settings=pipeline_settings)


class TestStoredFilename:
    """Test suite for stored_filename()."""

    def test_stored_filename_should_prefix_epoch_millis(self) -> None:
        prefix, name = stored_filename("report.pdf").split("_", 1)

        assert name == "report.pdf"
        assert prefix.isdigit() and len(prefix) >= 13


class TestIngestionPipelineValidate:
    """Test suite for validate()."""

    def test_validate_should_reject_unsupported_type(self, pipeline) -> None:
        with pytest.raises(ValidationError) as exc_info:
            pipeline.validate("page.html", "text/html", 10)

        assert exc_info.value.details["field"] == "mime_type"

    def test_validate_should_reject_oversized_file(self, pipeline) -> None:
        with pytest.raises(ValidationError) as exc_info:
            pipeline.validate("big.txt", "text/plain", 1025)

        assert exc_info.value.details["field"] == "size"

    def test_validate_should_reject_blank_filename(self, pipeline) -> None:
        with pytest.raises(ValidationError):
            pipeline.validate("  ", "text/plain", 10)

    def test_validate_should_accept_file_at_size_limit(self, pipeline) -> None:
        pipeline.validate("ok.txt", "text/plain", 1024)


class TestIngestionPipelineIngest:
    """Test suite for ingest() and process()."""

    @pytest.mark.asyncio
    async def test_ingest_should_complete_and_store_chunks(self, pipeline, test_async_db) -> None:
        # Act
        result = await pipeline.ingest("policy.txt", "text/plain", SAMPLE_TEXT.encode(), "alice")

        # Assert
        assert result.succeeded
        assert result.chunk_count > 1
        document = await document_crud.get_by_id(test_async_db, result.document_id)
        assert document.status == DocumentStatus.COMPLETED
        assert document.chunk_count == result.chunk_count
        assert document.error_message is None
        assert document.uploaded_by == "alice"
        assert document.filename.endswith("_policy.txt")
        store = SQLVectorStore(test_async_db, TEST_DIMENSION)
        assert await store.count_chunks(result.document_id) == result.chunk_count

    @pytest.mark.asyncio
    async def test_ingest_should_record_chunk_metadata(self, pipeline, test_async_db) -> None:
        # Arrange
        result = await pipeline.ingest("policy.txt", "text/plain", SAMPLE_TEXT.encode())
        store = SQLVectorStore(test_async_db, TEST_DIMENSION)

        # Act
        hits = await store.search([1.0] * TEST_DIMENSION, k=result.chunk_count)

        # Assert
        indexes = sorted(hit.metadata["chunkIndex"] for hit in hits)
        assert indexes == list(range(result.chunk_count))
        assert {hit.metadata["filename"] for hit in hits} == {"policy.txt"}
        assert {hit.metadata["mimeType"] for hit in hits} == {"text/plain"}

    @pytest.mark.asyncio
    async def test_ingest_should_default_owner(self, pipeline, test_async_db) -> None:
        result = await pipeline.ingest("a.txt", "text/plain", b"Some text.")

        document = await document_crud.get_by_id(test_async_db, result.document_id)
        assert document.uploaded_by == "development-user"

    @pytest.mark.asyncio
    async def test_ingest_should_fail_document_without_text(self, pipeline, test_async_db) -> None:
        # Act
        result = await pipeline.ingest("blank.txt", "text/plain", b"  \n\n  ")

        # Assert
        assert result.status == DocumentStatus.FAILED
        assert result.chunk_count == 0
        document = await document_crud.get_by_id(test_async_db, result.document_id)
        assert document.status == DocumentStatus.FAILED
        assert "No text" in document.error_message
        assert document.chunk_count == 0

    @pytest.mark.asyncio
    async def test_ingest_should_fail_document_with_unreadable_pdf(
        self, pipeline, test_async_db
    ) -> None:
        result = await pipeline.ingest("broken.pdf", "application/pdf", b"garbage bytes")

        assert result.status == DocumentStatus.FAILED
        document = await document_crud.get_by_id(test_async_db, result.document_id)
        assert document.error_message

    @pytest.mark.asyncio
    async def test_ingest_should_store_no_chunks_when_embedding_fails(
        self, test_async_db, pipeline_settings
    ) -> None:
        # Arrange
        client = EmbeddingClient(FailingEmbeddings(), dimension=TEST_DIMENSION, max_retries=1)
        pipeline = IngestionPipeline(test_async_db, client, settings=pipeline_settings)

        # Act
        result = await pipeline.ingest("policy.txt", "text/plain", SAMPLE_TEXT.encode())

        # Assert
        assert result.status == DocumentStatus.FAILED
        document = await document_crud.get_by_id(test_async_db, result.document_id)
        assert document.status == DocumentStatus.FAILED
        assert "unavailable" in document.error_message
        store = SQLVectorStore(test_async_db, TEST_DIMENSION)
        assert await store.count_chunks(result.document_id) == 0

    @pytest.mark.asyncio
    async def test_ingest_should_create_nothing_when_validation_fails(
        self, pipeline, test_async_db
    ) -> None:
        with pytest.raises(ValidationError):
            await pipeline.ingest("image.png", "image/png", b"\x89PNG")

        assert list(await document_crud.list_newest_first(test_async_db)) == []

    @pytest.mark.asyncio
    async def test_process_should_raise_for_missing_document(self, pipeline) -> None:
        with pytest.raises(DocumentNotFoundError):
            await pipeline.process(uuid.uuid4(), b"text")
