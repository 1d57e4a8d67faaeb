"""Placeholder format and the unknown-placeholder audit.

Placeholders look like ``__EMAIL_1__`` or ``__IBAN_NL_3__``: a prefix of
upper-case letter groups, a decimal counter and the ``__`` closing marker.
"""

from __future__ import annotations
import re
from typing import Iterable

CLOSING_MARKER = "__"

PLACEHOLDER_PATTERN = re.compile(r"__[A-Z]+(?:_[A-Z]+)*_\d+__")


def format_placeholder(prefix: str, counter: int) -> str:
    """Return ``prefix + counter + closing marker``."""
    return f"{prefix}{counter}{CLOSING_MARKER}"


def find_unknown_placeholders(text: str, known: Iterable[str]) -> list[str]:
    """Detect placeholder-shaped tokens in text that are not in ``known``.

    Useful for warning users who typed something placeholder-like by hand,
    or for spotting tokens a model invented. Tokens are returned once each,
    in first-seen order.
    """
    if not text:
        return []
    known_set = set(known)
    unknown: dict[str, None] = {}
    for match in PLACEHOLDER_PATTERN.finditer(text):
        token = match.group()
        if token not in known_set:
            unknown.setdefault(token)
    return list(unknown)
