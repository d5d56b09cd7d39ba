"""
Test suite for ExtractionTask.

System role: Verification of per-media-type text extraction
"""

import io

import docx
import pytest

from ragchat.core.document_processing.configs import (
    DOCX_MIME_TYPE,
    PDF_MIME_TYPE,
    TEXT_MIME_TYPE,
)
from ragchat.core.document_processing.tasks.extraction_task import ExtractionTask
from ragchat.core.exceptions import ExtractionError


def build_docx(*paragraphs: str) -> bytes:
    document = docx.Document()
    for text in paragraphs:
        document.add_paragraph(text)
    buffer = io.BytesIO()
    document.save(buffer)
    return buffer.getvalue()


class TestExtractionTask:
    """Test suite for ExtractionTask.extract()."""

    def test_extract_should_decode_plain_text(self) -> None:
        text = ExtractionTask().extract("Grüße aus Wien".encode("utf-8"), TEXT_MIME_TYPE)

        assert text == "Grüße aus Wien"

    def test_extract_should_replace_invalid_utf8(self) -> None:
        text = ExtractionTask().extract(b"abc\xffdef", TEXT_MIME_TYPE)

        assert text == "abc\ufffddef"

    def test_extract_should_join_docx_paragraphs(self) -> None:
        # Arrange
        content = build_docx("First paragraph.", "", "Second paragraph.")

        # Act
        text = ExtractionTask().extract(content, DOCX_MIME_TYPE)

        # Assert
        assert text == "First paragraph.\n\nSecond paragraph."

    def test_extract_should_raise_for_corrupt_pdf(self) -> None:
        with pytest.raises(ExtractionError) as exc_info:
            ExtractionTask().extract(b"not a pdf at all", PDF_MIME_TYPE, document_id="doc-1")

        assert exc_info.value.details["document_id"] == "doc-1"
        assert exc_info.value.details["mime_type"] == PDF_MIME_TYPE

    def test_extract_should_raise_for_corrupt_docx(self) -> None:
        with pytest.raises(ExtractionError):
            ExtractionTask().extract(b"PK broken", DOCX_MIME_TYPE)

    def test_extract_should_reject_unsupported_type(self) -> None:
        with pytest.raises(ExtractionError, match="Unsupported media type"):
            ExtractionTask().extract(b"<html></html>", "text/html")
