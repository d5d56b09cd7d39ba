"""
Chat stream wire format: citation envelope framing and demultiplexing.

Exports: BEGIN_MARKER, END_MARKER, encode_citation_envelope, frame_response,
CitationStreamDemultiplexer, DemultiplexedStream, demultiplex,
AnswerSegment, resolve_citations
"""

from ragchat.core.streaming.citation_resolver import AnswerSegment, resolve_citations
from ragchat.core.streaming.demultiplexer import (
    CitationStreamDemultiplexer,
    DemultiplexedStream,
    demultiplex,
)
from ragchat.core.streaming.framer import (
    BEGIN_MARKER,
    END_MARKER,
    encode_citation_envelope,
    frame_response,
)

__all__ = [
    "BEGIN_MARKER",
    "END_MARKER",
    "encode_citation_envelope",
    "frame_response",
    "CitationStreamDemultiplexer",
    "DemultiplexedStream",
    "demultiplex",
    "AnswerSegment",
    "resolve_citations",
]
