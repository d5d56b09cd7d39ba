"""
Inline citation resolution.

Splits answer text at [n] references so a renderer can link each one to
its citation.

Dependencies: pydantic, ragchat.models
System role: Client-side rendering helper
"""

import re
from collections.abc import Sequence

from pydantic import BaseModel

from ragchat.models.citation import Citation

CITATION_PATTERN = re.compile(r"\[(\d+)\]")


class AnswerSegment(BaseModel):
    """Plain text, or a resolved [n] reference with its citation."""

    text: str
    citation: Citation | None = None


def resolve_citations(answer: str, citations: Sequence[Citation]) -> list[AnswerSegment]:
    """
    Resolve [n] references against the citation list.

    A reference resolves to the citation whose id equals n. Numbers without a
    citation stay part of the surrounding text.

    Args:
        answer: Answer text
        citations: Citations from the envelope

    Returns:
        list[AnswerSegment]: Segments covering the whole answer, in order
    """
    by_id = {citation.id: citation for citation in citations}
    segments: list[AnswerSegment] = []
    text = ""
    position = 0

    for match in CITATION_PATTERN.finditer(answer):
        citation = by_id.get(int(match.group(1)))
        if citation is None:
            continue
        text += answer[position:match.start()]
        if text:
            segments.append(AnswerSegment(text=text))
            text = ""
        segments.append(AnswerSegment(text=match.group(0), citation=citation))
        position = match.end()

    text += answer[position:]
    if text:
        segments.append(AnswerSegment(text=text))
    return segments
