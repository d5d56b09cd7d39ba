"""
Task modules for document ingestion pipeline.

Exports: ExtractionTask, SplittingTask, EmbeddingTask, split_text
"""

from .embedding_task import EmbeddingTask
from .extraction_task import ExtractionTask
from .splitting_task import SplittingTask, split_text

__all__ = [
    "ExtractionTask",
    "SplittingTask",
    "EmbeddingTask",
    "split_text",
]
