"""
Retrieval of numbered context and citations for chat turns.

Exports: RetrievalService, RetrievalResult, build_prompt_messages
"""

from ragchat.core.retrieval.citation_assembler import (
    RetrievalResult,
    RetrievalService,
    build_prompt_messages,
)

__all__ = ["RetrievalService", "RetrievalResult", "build_prompt_messages"]
