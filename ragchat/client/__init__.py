"""
Python client for the chat API.

Exports: ChatClient, ChatAnswer
"""

from ragchat.client.chat_client import ChatAnswer, ChatClient

__all__ = ["ChatClient", "ChatAnswer"]
