"""
Text splitting task.

Cuts extracted text into overlapping windows, preferring to end a window
at a sentence boundary, then at a word boundary.

Dependencies: ragchat.core.exceptions
System role: Second stage of document ingestion pipeline
"""

from ragchat.core.exceptions import ValidationError


def _find_boundary(text: str, start: int, end: int, min_index: float) -> int | None:
    """Window end at the last period (inclusive) or space (exclusive) past min_index."""
    period = text.rfind(".", start, end)
    if period > min_index:
        return period + 1
    space = text.rfind(" ", start, end)
    if space > min_index:
        return space
    return None


def split_text(text: str, chunk_size: int = 1000, overlap: int = 200) -> list[str]:
    """
    Split text into overlapping, trimmed chunks.

    A window that stops short of the end of the text is shortened to its last
    period, else its last space, provided that boundary lies past the middle of
    the window. Consecutive windows share `overlap` characters; the next window
    always starts after the previous one.

    Args:
        text: Text to split
        chunk_size: Maximum window length in characters
        overlap: Characters shared by consecutive windows

    Returns:
        list[str]: Non-empty chunks in text order

    Raises:
        ValidationError: chunk_size < 1 or overlap < 0
    """
    if chunk_size < 1:
        raise ValidationError("chunk_size must be at least 1", field="chunk_size")
    if overlap < 0:
        raise ValidationError("overlap must not be negative", field="overlap")

    chunks: list[str] = []
    length = len(text)
    start = 0

    while start < length:
        end = min(start + chunk_size, length)
        if end < length:
            boundary = _find_boundary(text, start, end, start + chunk_size / 2)
            if boundary is not None:
                end = boundary

        chunk = text[start:end].strip()
        if chunk:
            chunks.append(chunk)

        if end >= length:
            break
        start = max(end - overlap, start + 1)

    return chunks


class SplittingTask:
    """Split document text into chunks."""

    def __init__(self, chunk_size: int = 1000, chunk_overlap: int = 200) -> None:
        """
        Initialize splitting task.

        Args:
            chunk_size: Maximum chunk size in characters
            chunk_overlap: Overlap between consecutive chunks

        Raises:
            ValidationError: chunk_size < 1 or chunk_overlap < 0
        """
        if chunk_size < 1:
            raise ValidationError("chunk_size must be at least 1", field="chunk_size")
        if chunk_overlap < 0:
            raise ValidationError("chunk_overlap must not be negative", field="chunk_overlap")
        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap

    def split(self, text: str) -> list[str]:
        """
        Split text into chunks.

        Args:
            text: Extracted document text

        Returns:
            list[str]: Trimmed, non-empty chunks
        """
        return split_text(text, self.chunk_size, self.chunk_overlap)
