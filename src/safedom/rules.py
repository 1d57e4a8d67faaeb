"""Rule registry: composes and validates ordered redaction rule sets.

A rule set is built from three layers, in this order:

    1. country rules   (for each requested code, in the order given)
    2. base rules      (email, IBAN, card, SSN, phone; two are toggle-able)
    3. extra rules     (caller-supplied, appended last)

Earlier rules shadow later ones: once a span is replaced by a placeholder
no later rule sees it. These patterns are heuristic and do not guarantee
complete anonymisation.
"""

from __future__ import annotations
import logging
import re
from typing import Iterable, Sequence

from .exceptions import ConfigurationError
from .types import RedactionRule
from .validators import IBAN_LENGTHS, is_valid_bsn, is_valid_card_number, is_valid_iban

logger = logging.getLogger(__name__)


# ── Base rules ───────────────────────────────────────────────────────

EMAIL_RULE = RedactionRule(
    type="email",
    pattern=re.compile(r"\b[A-Z0-9._%+\-]+@[A-Z0-9.\-]+\.[A-Z]{2,}\b", re.IGNORECASE),
    placeholder_prefix="__EMAIL_",
)

# Generic cross-border account number
IBAN_RULE = RedactionRule(
    type="iban",
    pattern=re.compile(r"\b[A-Z]{2}[0-9]{2}[A-Z0-9]{4}[A-Z0-9]{7}[A-Z0-9]{0,16}\b", re.IGNORECASE),
    placeholder_prefix="__IBAN_",
    validate=is_valid_iban,
)

CREDIT_CARD_RULE = RedactionRule(
    type="creditcard",
    # 13-19 digits allowing spaces or hyphens
    pattern=re.compile(r"\b(?:\d[ \-]*?){13,19}\b"),
    placeholder_prefix="__CARD_",
    validate=is_valid_card_number,
)

SSN_RULE = RedactionRule(
    type="ssn",
    pattern=re.compile(r"\b\d{3}-\d{2}-\d{4}\b"),
    placeholder_prefix="__SSN_",
)

PHONE_RULE = RedactionRule(
    type="phone",
    # 7-15 digits with common separators, keeping a leading "+"
    pattern=re.compile(r"(?<!\w)(?=(?:\D*\d){7,15}\b)\+?(?:\d[ \t().\-]?){6,14}\d(?!\w)"),
    placeholder_prefix="__PHONE_",
)

DEFAULT_RULES: tuple[RedactionRule, ...] = (
    EMAIL_RULE,
    IBAN_RULE,
    CREDIT_CARD_RULE,
    SSN_RULE,
    PHONE_RULE,
)


# ── Country rules ────────────────────────────────────────────────────

def _iban_rule(country: str) -> RedactionRule:
    """Country IBAN in compact or 4-grouped print form."""
    bban_len = IBAN_LENGTHS[country] - 4
    return RedactionRule(
        type=f"iban-{country.lower()}",
        pattern=re.compile(rf"\b{country}\d{{2}}(?: ?[A-Z0-9]){{{bban_len}}}\b"),
        placeholder_prefix=f"__IBAN_{country}_",
        validate=is_valid_iban,
    )


_COUNTRY_RULES: dict[str, tuple[RedactionRule, ...]] = {
    "be": (_iban_rule("BE"),),
    "de": (_iban_rule("DE"),),
    "es": (_iban_rule("ES"),),
    "fr": (_iban_rule("FR"),),
    "gb": (
        _iban_rule("GB"),
        RedactionRule(
            type="nino-gb",
            pattern=re.compile(
                r"\b(?!BG|GB|KN|NK|NT|TN|ZZ)[A-CEGHJ-PR-TW-Z][A-CEGHJ-NPR-TW-Z]"
                r" ?\d{2} ?\d{2} ?\d{2} ?[A-D]\b"
            ),
            placeholder_prefix="__NINO_GB_",
        ),
    ),
    "nl": (
        _iban_rule("NL"),
        RedactionRule(
            type="bsn-nl",
            pattern=re.compile(r"\b\d{4}\.?\d{2}\.?\d{3}\b"),
            placeholder_prefix="__BSN_NL_",
            validate=is_valid_bsn,
        ),
    ),
}


def available_countries() -> list[str]:
    """Return the country codes that have dedicated rules."""
    return sorted(_COUNTRY_RULES)


# ── Composition ──────────────────────────────────────────────────────

def validate_redaction_rules(rules: Iterable[RedactionRule]) -> None:
    """Reject rules that would not report every match in one pass.

    Downstream counting assumes each rule surfaces all non-overlapping
    matches in a single scan. Full ReDoS protection is out of scope;
    prefer an allow-list of vetted patterns for untrusted input.

    Raises:
        ConfigurationError: on the first offending rule.
    """
    for rule in rules:
        if not isinstance(rule.pattern, re.Pattern):
            raise ConfigurationError(
                f"Redaction rule {rule.type!r} must use a compiled pattern, "
                f"got {type(rule.pattern).__name__}"
            )
        if rule.count != 0:
            raise ConfigurationError(
                f"Redaction rule {rule.type!r} must scan for all matches "
                f"(count=0), got count={rule.count}"
            )
        if not rule.placeholder_prefix:
            raise ConfigurationError(f"Redaction rule {rule.type!r} has an empty placeholder prefix")
        # "__X1" at 1 and "__X" at 11 would both render as "__X11__"
        if rule.placeholder_prefix[-1].isdigit():
            raise ConfigurationError(
                f"Redaction rule {rule.type!r} placeholder prefix "
                f"{rule.placeholder_prefix!r} must not end in a digit"
            )


def create_redaction_rules(
    *,
    countries: Sequence[str] = (),
    include_generic_phone: bool = True,
    include_generic_account_number: bool = True,
    extra_rules: Sequence[RedactionRule] = (),
) -> tuple[RedactionRule, ...]:
    """Compose a rule set: country rules, then base rules, then extras.

    Args:
        countries: Country codes (e.g. ``["nl", "de"]``); unknown codes
            contribute no rules.
        include_generic_phone: Keep the generic phone rule.
        include_generic_account_number: Keep the generic IBAN rule.
        extra_rules: Caller rules appended after everything else.

    Raises:
        ConfigurationError: if any rule is not exhaustive-scanning.
    """
    rules: list[RedactionRule] = []

    for code in countries:
        country_rules = _COUNTRY_RULES.get(code.strip().lower())
        if country_rules is None:
            logger.warning("No redaction rules for country code %r", code)
            continue
        rules.extend(country_rules)

    for rule in DEFAULT_RULES:
        if rule is PHONE_RULE and not include_generic_phone:
            continue
        if rule is IBAN_RULE and not include_generic_account_number:
            continue
        rules.append(rule)

    rules.extend(extra_rules)
    validate_redaction_rules(rules)

    logger.debug("Composed rule set: %s", [r.type for r in rules])
    return tuple(rules)


def select_rules(
    requested: Iterable[str],
    available: Sequence[RedactionRule],
) -> Sequence[RedactionRule]:
    """Pick the rules whose type was requested, keeping rule-set order.

    An empty request, or one that matches nothing, returns ``available``.
    """
    wanted = set(requested)
    if not wanted:
        return available
    matched = [rule for rule in available if rule.type in wanted]
    return matched if matched else available
