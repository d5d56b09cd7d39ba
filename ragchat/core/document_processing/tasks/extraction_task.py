"""
Text extraction task.

Turns uploaded bytes into plain text according to the declared media type:
PDF through LangChain PyPDFLoader, DOCX through python-docx, text/plain as
UTF-8 with replacement characters.

Dependencies: langchain_community.document_loaders, docx
System role: First stage of document ingestion pipeline
"""

import io
import logging
import os
import tempfile

from docx import Document as DocxDocument
from langchain_community.document_loaders import PyPDFLoader

from ragchat.core.document_processing.configs import (
    DOCX_MIME_TYPE,
    PDF_MIME_TYPE,
    TEXT_MIME_TYPE,
)
from ragchat.core.exceptions import ExtractionError

logger = logging.getLogger(__name__)


class ExtractionTask:
    """Extract plain text from PDF, DOCX and text uploads."""

    def extract(self, content: bytes, mime_type: str, document_id: str | None = None) -> str:
        """
        Extract text from file content.

        Blocking; call from a worker thread inside async code.

        Args:
            content: Raw file bytes
            mime_type: Declared media type
            document_id: Document reference for error context

        Returns:
            str: Extracted text (may be empty)

        Raises:
            ExtractionError: Unsupported media type or unreadable file
        """
        if mime_type == TEXT_MIME_TYPE:
            return content.decode("utf-8", errors="replace")

        try:
            if mime_type == PDF_MIME_TYPE:
                return self._extract_pdf(content)
            if mime_type == DOCX_MIME_TYPE:
                return self._extract_docx(content)
        except Exception as e:
            logger.error(
                f"{__name__}:extract - {type(e).__name__}: {e}",
                extra={"document_id": document_id, "mime_type": mime_type},
            )
            raise ExtractionError(
                f"Failed to extract text: {e}",
                document_id=document_id,
                mime_type=mime_type,
            ) from e

        raise ExtractionError(
            f"Unsupported media type: {mime_type}",
            document_id=document_id,
            mime_type=mime_type,
        )

    def _extract_pdf(self, content: bytes) -> str:
        # PyPDFLoader reads from a path
        fd, path = tempfile.mkstemp(suffix=".pdf")
        try:
            with os.fdopen(fd, "wb") as handle:
                handle.write(content)
            pages = PyPDFLoader(path).load()
            return "\n\n".join(page.page_content for page in pages)
        finally:
            os.remove(path)

    def _extract_docx(self, content: bytes) -> str:
        document = DocxDocument(io.BytesIO(content))
        return "\n\n".join(paragraph.text for paragraph in document.paragraphs if paragraph.text)
