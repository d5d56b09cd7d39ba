"""
Database helpers for document ingestion.

Exports: DocumentStatusUpdater
"""

from .document_status_updater import DocumentStatusUpdater

__all__ = ["DocumentStatusUpdater"]
