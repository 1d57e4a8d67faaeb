"""Reinjection: restore original values into text that still holds placeholders.

    reinject_placeholders("Hello __EMAIL_1__", ctx.redactions)
    # "Hello person@example.com"

Uses plain substring replacement, never regex, so an original value that
happens to contain pattern syntax or placeholder-like text cannot trigger
further substitution on its own.
"""

from __future__ import annotations
from typing import Any, Iterable, Mapping, Union

from .types import Redaction

RedactionRecord = Union[Redaction, Mapping[str, Any]]


def _unpack(record: RedactionRecord) -> tuple[str, str]:
    """(placeholder, original) from a Redaction or a stored JSON mapping."""
    if isinstance(record, Mapping):
        placeholder, original = record.get("placeholder"), record.get("original")
    else:
        placeholder, original = record.placeholder, record.original
    return placeholder or "", original or ""


def reinject_placeholders(text: str, redactions: Iterable[RedactionRecord] | None) -> str:
    """Replace every occurrence of each placeholder with its original value.

    Records are applied in the order given. A missing original substitutes
    an empty string; a record without a placeholder is skipped.
    """
    if not text:
        return ""
    if not redactions:
        return text

    result = text
    for record in redactions:
        placeholder, original = _unpack(record)
        if not placeholder:
            continue
        result = result.replace(placeholder, original)
    return result
