"""Per-element directives read from the ``data-ai`` attribute.

    data-ai="include"              -> collected verbatim
    data-ai="exclude"              -> node and whole subtree skipped
    data-ai="redact:email phone"   -> collected after redaction
    (absent or blank)              -> no directive
"""

from __future__ import annotations
import enum
import re
from dataclasses import dataclass

DIRECTIVE_ATTRIBUTE = "data-ai"
LABEL_ATTRIBUTE = "data-ai-label"

_REDACT_PREFIX = "redact:"
_WHITESPACE = re.compile(r"\s+")


class DirectiveKind(enum.Enum):
    INCLUDE = "include"
    EXCLUDE = "exclude"
    REDACT = "redact"
    # Non-empty value that is none of the above; bears a directive but collects nothing
    UNRECOGNIZED = "unrecognized"


@dataclass(frozen=True, slots=True)
class Directive:
    kind: DirectiveKind
    types: tuple[str, ...] = ()       # only for REDACT
    raw: str = ""


def parse_directive(value: str | None) -> Directive | None:
    """Parse a raw attribute value. Returns None when there is no directive."""
    if value is None:
        return None
    raw = value.strip()
    if not raw:
        return None
    if raw == "include":
        return Directive(DirectiveKind.INCLUDE, raw=raw)
    if raw == "exclude":
        return Directive(DirectiveKind.EXCLUDE, raw=raw)
    if raw.startswith(_REDACT_PREFIX):
        types = tuple(t for t in _WHITESPACE.split(raw[len(_REDACT_PREFIX):]) if t)
        return Directive(DirectiveKind.REDACT, types=types, raw=raw)
    return Directive(DirectiveKind.UNRECOGNIZED, raw=raw)
