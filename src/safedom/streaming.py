"""Streaming reinjector: buffers chunks and restores placeholders as they complete.

For streamed model output where placeholders arrive as fragments:
    __EM  ->  __EMAIL_  ->  __EMAIL_1_  ->  __EMAIL_1__

The reinjector holds back anything that could still grow into a
placeholder and emits everything else immediately.

Usage:
    reinjector = StreamingReinjector(ctx.redactions)
    for chunk in stream:
        ready_text = reinjector.feed(chunk)
        if ready_text:
            yield ready_text
    # Flush any remaining buffer
    yield reinjector.flush()
"""

from __future__ import annotations
import re
from typing import Iterable

from .placeholders import PLACEHOLDER_PATTERN
from .reinject import RedactionRecord, _unpack, reinject_placeholders

# Every proper prefix of a placeholder that starts with the opening "__"
_PARTIAL = re.compile(r"__?|__[A-Z]+(?:_[A-Z]+)*(?:_(?:\d+_?)?)?")


class StreamingReinjector:
    """Buffers streaming chunks and reinjects complete placeholders."""

    __slots__ = ("_redactions", "_originals", "_buffer", "_max_token_len")

    def __init__(self, redactions: Iterable[RedactionRecord], *, max_token_len: int = 64) -> None:
        self._redactions = list(redactions)
        self._originals: dict[str, str] = {}
        for record in self._redactions:
            placeholder, original = _unpack(record)
            if placeholder:
                self._originals.setdefault(placeholder, original)
        self._buffer = ""
        self._max_token_len = max_token_len  # safety limit

    def feed(self, chunk: str) -> str:
        """Feed a chunk, return any text ready to emit."""
        self._buffer += chunk
        return self._drain()

    def flush(self) -> str:
        """Flush remaining buffer (call at end of stream)."""
        out = self._buffer
        self._buffer = ""
        return reinject_placeholders(out, self._redactions)

    def _emit(self, text: str) -> str:
        # Also covers placeholders with a non-standard prefix, when whole
        return reinject_placeholders(text, self._redactions)

    def _drain(self) -> str:
        out_parts: list[str] = []

        while self._buffer:
            idx = self._buffer.find("__")

            if idx == -1:
                # A trailing "_" may be the first half of an opening marker
                if self._buffer.endswith("_"):
                    out_parts.append(self._emit(self._buffer[:-1]))
                    self._buffer = "_"
                else:
                    out_parts.append(self._emit(self._buffer))
                    self._buffer = ""
                break

            if idx > 0:
                out_parts.append(self._emit(self._buffer[:idx]))
                self._buffer = self._buffer[idx:]

            # Buffer now starts with "__"
            m = PLACEHOLDER_PATTERN.match(self._buffer)
            if m:
                token = m.group()
                out_parts.append(self._originals.get(token, token))
                self._buffer = self._buffer[m.end():]
                continue

            if _PARTIAL.fullmatch(self._buffer) and len(self._buffer) <= self._max_token_len:
                # Still accumulating a potential placeholder
                break

            # Not a placeholder start; release one underscore and rescan
            out_parts.append("_")
            self._buffer = self._buffer[1:]

        return "".join(out_parts)
