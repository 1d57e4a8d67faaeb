"""Context assembler: merges collected fragments into an AiContext."""

from __future__ import annotations
from types import MappingProxyType
from typing import Iterable

from .types import AiContext, Redaction

FRAGMENT_SEPARATOR = "\n\n"
FIELD_SEPARATOR = "\n"


class ContextAssembler:
    """Accumulates fragments in traversal order.

    Labels are unique keys; a repeated label appends to the existing value
    on a new line. Fragments without a label only reach ``raw_text``.
    """

    __slots__ = ("_fields", "_parts", "_redactions")

    def __init__(self) -> None:
        self._fields: dict[str, str] = {}
        self._parts: list[str] = []
        self._redactions: list[Redaction] = []

    def add(
        self,
        text: str,
        label: str | None = None,
        redactions: Iterable[Redaction] = (),
    ) -> None:
        self._parts.append(text)
        if label:
            existing = self._fields.get(label)
            self._fields[label] = f"{existing}{FIELD_SEPARATOR}{text}" if existing else text
        self._redactions.extend(redactions)

    def build(self) -> AiContext:
        return AiContext(
            fields=MappingProxyType(dict(self._fields)),
            raw_text=FRAGMENT_SEPARATOR.join(self._parts),
            redactions=tuple(self._redactions),
        )
