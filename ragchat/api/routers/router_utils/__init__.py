"""Router utilities."""

from .document_utils import process_document_background
from .error_handling import register_exception_handlers, status_code_for

__all__ = [
    "process_document_background",
    "register_exception_handlers",
    "status_code_for",
]
