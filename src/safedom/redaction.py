"""Redaction engine: applies an ordered rule set to a string.

Usage:
    from safedom import apply_redactions, DEFAULT_RULES

    result = apply_redactions("Contact a@x.com and b@y.com.", DEFAULT_RULES)
    print(result.text)          # "Contact __EMAIL_1__ and __EMAIL_2__."
    print(result.redactions)    # (Redaction("__EMAIL_1__", "a@x.com", "email"), ...)

Rules run in sequence over the *working* text, so an earlier rule can
consume a span that a later one would otherwise match. Rule authors must
keep patterns from matching placeholder syntax; nothing guards against
it at runtime.
"""

from __future__ import annotations
import logging
import re
from typing import Iterable

from .placeholders import format_placeholder
from .types import Redaction, RedactionResult, RedactionRule

logger = logging.getLogger(__name__)


def apply_redactions(
    text: str,
    rules: Iterable[RedactionRule],
    start_counter: int = 1,
) -> RedactionResult:
    """Replace every accepted match with a numbered placeholder.

    The counter is shared by all rules in the call, so placeholders are
    unique within one run and increase in encounter order (all matches of
    the first rule, left to right, then the second rule, and so on).
    A match rejected by the rule's ``validate`` predicate stays literal.
    """
    if not text:
        return RedactionResult(text="")

    rules = tuple(rules)
    working = text
    redactions: list[Redaction] = []
    counter = start_counter

    for rule in rules:
        # Compiled patterns hold no scan position; every sub() is a fresh scan.
        def _replace(match: re.Match[str], rule: RedactionRule = rule) -> str:
            nonlocal counter
            original = match.group()
            if rule.validate is not None and not rule.validate(original):
                return original
            placeholder = format_placeholder(rule.placeholder_prefix, counter)
            counter += 1
            redactions.append(Redaction(placeholder=placeholder, original=original, type=rule.type))
            return placeholder

        working = rule.pattern.sub(_replace, working, count=rule.count)

    if redactions:
        logger.debug(
            "Applied %d rules: %d redactions (counter %d..%d)",
            len(rules), len(redactions), start_counter, counter - 1,
        )
    return RedactionResult(text=working, redactions=tuple(redactions))
