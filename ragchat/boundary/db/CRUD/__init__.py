"""
CRUD operations for database models.

Exports base CRUD class and model-specific CRUD implementations
with pre-instantiated singletons for direct use.

Usage:
    from ragchat.boundary.db.CRUD import document_crud, chat_crud

    document = await document_crud.get_by_id(db, document_id)
"""

from ragchat.boundary.db.CRUD.base_crud import BaseCRUD
from ragchat.boundary.db.CRUD.chat_crud import ChatCRUD, chat_crud
from ragchat.boundary.db.CRUD.document_crud import DocumentCRUD, document_crud

__all__ = [
    "BaseCRUD",
    "DocumentCRUD",
    "document_crud",
    "ChatCRUD",
    "chat_crud",
]
