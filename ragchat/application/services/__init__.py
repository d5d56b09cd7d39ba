"""
Application services.

Exports: ChatService, ChatTurn, DocumentService, SessionService
"""

from ragchat.application.services.chat_service import ChatService, ChatTurn
from ragchat.application.services.document_service import DocumentService
from ragchat.application.services.session_service import SessionService

__all__ = ["ChatService", "ChatTurn", "DocumentService", "SessionService"]
