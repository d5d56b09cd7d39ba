"""
Streaming response framer.

A chat response body is one citation envelope followed by the answer text:

    __CITATIONS__[{"id": 1, ...}]__END_CITATIONS__The answer [1] ...

The envelope is written exactly once, before any answer text.

Dependencies: pydantic, ragchat.models
System role: Server side of the chat stream wire format
"""

import json
from collections.abc import AsyncIterable, AsyncIterator, Sequence

from ragchat.models.citation import Citation

BEGIN_MARKER = "__CITATIONS__"
END_MARKER = "__END_CITATIONS__"

# "_" as a JSON string escape; decodes back to "_"
_ESCAPED_UNDERSCORE = "\\u005f"


def _escape_markers(payload: str) -> str:
    # Both markers start with "_"; outside string values the JSON has none
    return payload.replace("_", _ESCAPED_UNDERSCORE)


def encode_citation_envelope(citations: Sequence[Citation]) -> str:
    """
    Serialize citations between the envelope markers.

    Every "_" in the JSON payload is written as a string escape, so no marker
    (overlapping ones included) can appear before the real END_MARKER.

    Args:
        citations: Citations in numbering order (may be empty)

    Returns:
        str: BEGIN_MARKER + JSON array + END_MARKER
    """
    payload = json.dumps(
        [citation.model_dump() for citation in citations],
        ensure_ascii=False,
    )
    return f"{BEGIN_MARKER}{_escape_markers(payload)}{END_MARKER}"


async def frame_response(
    citations: Sequence[Citation],
    fragments: AsyncIterable[str],
) -> AsyncIterator[str]:
    """
    Yield the envelope, then every answer fragment verbatim and in order.

    Args:
        citations: Citations announced before the answer
        fragments: Answer text fragments

    Yields:
        str: Envelope first, then fragments
    """
    yield encode_citation_envelope(citations)
    async for fragment in fragments:
        yield fragment
