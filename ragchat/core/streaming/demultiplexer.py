"""
Client-side stream demultiplexer.

Separates the citation envelope from the answer text of a chat response
body that arrives in arbitrary pieces (markers and multi-byte characters
may be split across pieces).

Dependencies: pydantic, ragchat.models
System role: Client side of the chat stream wire format
"""

import codecs
import json
import logging
from dataclasses import dataclass, field

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from ragchat.core.streaming.framer import BEGIN_MARKER, END_MARKER
from ragchat.models.citation import Citation

logger = logging.getLogger(__name__)

DEFAULT_MAX_PENDING_CHARS = 1_000_000

_citation_list = TypeAdapter(list[Citation])


@dataclass
class DemultiplexedStream:
    """A complete response body split into answer text and citations."""

    answer: str
    citations: list[Citation] = field(default_factory=list)
    envelope_error: str | None = None


class CitationStreamDemultiplexer:
    """
    Incremental envelope/answer splitter.

    Text is held back while the buffer could still be an envelope, then
    released. Exactly one envelope is stripped from the held-back text;
    marker strings arriving afterwards are plain answer text. A malformed
    envelope is released verbatim as answer text with envelope_error set.
    A body that does not open with BEGIN_MARKER is released as plain text
    as soon as that is known; an envelope that never terminates is released
    at close() or once max_pending_chars is exceeded.
    """

    def __init__(self, max_pending_chars: int = DEFAULT_MAX_PENDING_CHARS) -> None:
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._max_pending_chars = max_pending_chars
        self._pending = ""
        self._released = False
        self.citations: list[Citation] = []
        self.envelope_found = False
        self.envelope_error: str | None = None

    def feed(self, data: bytes | str) -> str:
        """
        Consume the next piece of the body.

        Args:
            data: Raw bytes (decoded incrementally as UTF-8) or text

        Returns:
            str: Answer text that became renderable, possibly empty
        """
        text = self._decoder.decode(data) if isinstance(data, bytes) else data
        if self._released:
            return text
        self._pending += text
        return self._try_release()

    def close(self) -> str:
        """
        Signal end of body.

        Returns:
            str: Any answer text still held back
        """
        tail = self._decoder.decode(b"", final=True)
        if self._released:
            return tail
        self._pending += tail
        released = self._try_release()
        if self._released:
            return released
        if BEGIN_MARKER in self._pending:
            self.envelope_error = "Citation envelope is not terminated"
            logger.warning(f"{__name__}:close - {self.envelope_error}")
        return self._release_raw()

    def _try_release(self) -> str:
        begin = self._pending.find(BEGIN_MARKER)
        if begin != -1:
            end = self._pending.find(END_MARKER, begin + len(BEGIN_MARKER))
            if end != -1:
                return self._strip_envelope(begin, end)
        elif not BEGIN_MARKER.startswith(self._pending):
            # Body does not open with an envelope: plain text from here on
            return self._release_raw()
        if len(self._pending) > self._max_pending_chars:
            return self._release_raw()
        return ""

    def _strip_envelope(self, begin: int, end: int) -> str:
        payload = self._pending[begin + len(BEGIN_MARKER):end]
        try:
            self.citations = _citation_list.validate_python(json.loads(payload))
        except (json.JSONDecodeError, PydanticValidationError) as e:
            self.envelope_error = f"Malformed citation envelope: {type(e).__name__}"
            logger.warning(f"{__name__}:feed - {self.envelope_error}")
            return self._release_raw()

        self.envelope_found = True
        answer = self._pending[:begin] + self._pending[end + len(END_MARKER):]
        self._pending = ""
        self._released = True
        return answer

    def _release_raw(self) -> str:
        text, self._pending = self._pending, ""
        self._released = True
        return text


def demultiplex(body: bytes | str) -> DemultiplexedStream:
    """
    Split a complete response body.

    Args:
        body: Entire response body

    Returns:
        DemultiplexedStream: Answer text, citations and any envelope error
    """
    demultiplexer = CitationStreamDemultiplexer()
    answer = demultiplexer.feed(body) + demultiplexer.close()
    return DemultiplexedStream(
        answer=answer,
        citations=demultiplexer.citations,
        envelope_error=demultiplexer.envelope_error,
    )
