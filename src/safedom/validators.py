"""Checksum predicates used to gate structural matches.

Each predicate takes the matched text exactly as it appeared and returns
True when the value is semantically plausible. A False result leaves the
span as literal text.
"""

from __future__ import annotations
import re

_NON_DIGIT = re.compile(r"[^0-9]")
_NON_ALNUM = re.compile(r"[^A-Z0-9]")

# ISO 13616 lengths for the countries with dedicated rules
IBAN_LENGTHS: dict[str, int] = {
    "BE": 16,
    "DE": 22,
    "ES": 24,
    "FR": 27,
    "GB": 22,
    "NL": 18,
}


def luhn_check(digits: str) -> bool:
    """Modulus 10 (Luhn) checksum over a string of digits."""
    if not digits.isdigit():
        return False

    total = 0
    for i, digit in enumerate(reversed(digits)):
        n = int(digit)
        if i % 2 == 1:
            n *= 2
            if n > 9:
                n -= 9
        total += n
    return total % 10 == 0


def is_valid_card_number(text: str) -> bool:
    """13-19 digits (separators ignored) passing Luhn."""
    digits = _NON_DIGIT.sub("", text)
    if not 13 <= len(digits) <= 19:
        return False
    return luhn_check(digits)


def is_valid_iban(text: str) -> bool:
    """ISO 13616 mod-97 check. Spaces and case are ignored."""
    s = _NON_ALNUM.sub("", text.upper())
    if len(s) < 15 or len(s) > 34 or not s[:2].isalpha() or not s[2:4].isdigit():
        return False

    expected = IBAN_LENGTHS.get(s[:2])
    if expected is not None and len(s) != expected:
        return False

    rearranged = s[4:] + s[:4]
    # A=10 .. Z=35
    numeric = "".join(str(int(ch, 36)) for ch in rearranged)
    return int(numeric) % 97 == 1


def is_valid_bsn(text: str) -> bool:
    """Dutch citizen service number (BSN) 11-test."""
    digits = _NON_DIGIT.sub("", text)
    if len(digits) != 9 or digits == "000000000":
        return False
    weights = (9, 8, 7, 6, 5, 4, 3, 2, -1)
    total = sum(int(d) * w for d, w in zip(digits, weights))
    return total % 11 == 0
