"""
Document API endpoints.

Routes:
- POST /documents - Upload a document (ingested in the background)
- GET /documents - List documents, newest first
- GET /documents/{doc_id} - Get one document
- DELETE /documents/{doc_id} - Delete a document and its chunks

Dependencies: ragchat.application.services, ragchat.models
System role: Document HTTP API
"""

import logging
from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Depends, File, Form, Response, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ragchat.api.deps import (
    get_db_session_factory,
    get_document_service,
    get_embedding_client,
    get_upload_document_service,
)
from ragchat.application.services.document_service import DocumentService
from ragchat.core.providers import EmbeddingClient
from ragchat.models.document import DocumentListResponse, DocumentResponse

from .router_utils.document_utils import process_document_background

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/documents", tags=["documents"])


@router.post("", response_model=DocumentResponse, status_code=status.HTTP_202_ACCEPTED)
async def upload_document(
    background_tasks: BackgroundTasks,
    file: UploadFile = File(...),
    uploaded_by: str | None = Form(default=None, alias="uploadedBy"),
    document_service: DocumentService = Depends(get_upload_document_service),
    embedding_client: EmbeddingClient = Depends(get_embedding_client),
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_db_session_factory),
) -> DocumentResponse:
    """
    Upload a document for ingestion.

    The document is created in "uploading" state and processed after the
    response is sent; poll GET /documents/{id} for its status.

    Args:
        background_tasks: FastAPI background task queue
        file: Uploaded file (PDF, DOCX or plain text)
        uploaded_by: Owner reference
        document_service: Injected DocumentService with ingestion pipeline
        embedding_client: Injected embedding client for the background task
        session_factory: Factory for the background task's session

    Returns:
        DocumentResponse: Created document

    Raises:
        ValidationError (400): Unsupported type, oversized or unnamed file
        ProviderUnavailable (503): Embedding provider not configured
    """
    content = await file.read()
    document = await document_service.register_upload(
        filename=file.filename or "",
        mime_type=file.content_type or "",
        size=len(content),
        uploaded_by=uploaded_by,
    )

    background_tasks.add_task(
        process_document_background,
        document_id=document.id,
        content=content,
        session_factory=session_factory,
        embedding_client=embedding_client,
    )

    logger.info(
        "Document upload accepted",
        extra={"document_id": str(document.id), "file_name": file.filename, "size": len(content)},
    )
    return DocumentResponse.model_validate(document)


@router.get("", response_model=DocumentListResponse)
async def list_documents(
    document_service: DocumentService = Depends(get_document_service),
) -> DocumentListResponse:
    """List all documents, newest first."""
    documents = await document_service.list_documents()
    return DocumentListResponse(
        documents=[DocumentResponse.model_validate(doc) for doc in documents],
        total=len(documents),
    )


@router.get("/{doc_id}", response_model=DocumentResponse)
async def get_document(
    doc_id: UUID,
    document_service: DocumentService = Depends(get_document_service),
) -> DocumentResponse:
    """
    Get a document with its ingestion status.

    Raises:
        DocumentNotFoundError (404): No such document
    """
    return DocumentResponse.model_validate(await document_service.get_document(doc_id))


@router.delete("/{doc_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_document(
    doc_id: UUID,
    document_service: DocumentService = Depends(get_document_service),
) -> Response:
    """
    Delete a document and its chunks. Deleting a missing document succeeds.

    Raises:
        StorageError (500): Delete failed
    """
    await document_service.delete_document(doc_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
