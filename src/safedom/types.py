"""Core types."""

from __future__ import annotations
import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Mapping


@dataclass(frozen=True, slots=True)
class RedactionRule:
    """A single pattern rule.

    ``count`` follows ``re.sub``: 0 replaces every non-overlapping match.
    Anything else stops after the first ``count`` matches, which the
    registry rejects.
    """
    type: str                                   # e.g. "email", "iban-nl"
    pattern: re.Pattern[str]
    placeholder_prefix: str                     # e.g. "__EMAIL_"
    validate: Callable[[str], bool] | None = field(default=None, compare=False)
    count: int = 0


@dataclass(frozen=True, slots=True)
class Redaction:
    """One accepted match, replaced by ``placeholder``."""
    placeholder: str
    original: str
    type: str

    def to_dict(self) -> dict[str, str]:
        return {"placeholder": self.placeholder, "original": self.original, "type": self.type}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Redaction":
        return cls(
            placeholder=str(data.get("placeholder") or ""),
            original=str(data.get("original") or ""),
            type=str(data.get("type") or ""),
        )


@dataclass(frozen=True, slots=True)
class RedactionResult:
    """Result of applying a rule set to one string."""
    text: str
    redactions: tuple[Redaction, ...] = ()


@dataclass(frozen=True, slots=True)
class AiContext:
    """Prompt-safe payload built from a document subtree."""
    fields: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    raw_text: str = ""
    redactions: tuple[Redaction, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "fields": dict(self.fields),
            "rawText": self.raw_text,
            "redactions": [r.to_dict() for r in self.redactions],
        }
