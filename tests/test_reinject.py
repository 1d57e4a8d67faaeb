"""Tests for reinjection, the streaming reinjector and the placeholder audit."""

import pytest

from safedom import (
    DEFAULT_RULES,
    Redaction,
    StreamingReinjector,
    apply_redactions,
    find_unknown_placeholders,
    reinject_placeholders,
)

REDACTIONS = [
    Redaction(placeholder="__EMAIL_1__", original="person@example.com", type="email"),
    Redaction(placeholder="__CARD_2__", original="4111 1111 1111 1111", type="creditcard"),
]


# ── Reinjection ──────────────────────────────────────────────────────

def test_replaces_every_occurrence():
    text = "Hello __A_1__, again __A_1__."
    records = [Redaction(placeholder="__A_1__", original="Bob", type="x")]
    assert reinject_placeholders(text, records) == "Hello Bob, again Bob."


def test_replaces_placeholders_deterministically():
    text = "Hello __EMAIL_1__, we masked your card __CARD_2__. Again, __EMAIL_1__ is hidden."
    result = reinject_placeholders(text, REDACTIONS)
    assert result.count("person@example.com") == 2
    assert "4111 1111 1111 1111" in result
    assert "__" not in result


def test_returns_original_text_when_no_redactions_provided():
    text = "No placeholders here."
    assert reinject_placeholders(text, []) == text
    assert reinject_placeholders(text, None) == text


def test_empty_text():
    assert reinject_placeholders("", REDACTIONS) == ""


def test_accepts_stored_json_records():
    records = [{"placeholder": "__A_1__", "type": "x"}, {"placeholder": "", "original": "zzz"}]
    assert reinject_placeholders("Hello __A_1__, again __A_1__.", records) == "Hello , again ."


def test_null_placeholder_record_leaves_text_unchanged():
    record = Redaction.from_dict({"placeholder": None, "original": "SECRET", "type": None})
    assert record.placeholder == ""
    assert record.type == ""
    text = "None of this should change"
    assert reinject_placeholders(text, [record]) == text
    assert reinject_placeholders(text, [{"placeholder": None, "original": "SECRET"}]) == text


def test_originals_are_inserted_literally():
    records = [Redaction(placeholder="[X_1]", original=r"$1 \g<0> .*", type="x")]
    assert reinject_placeholders("a [X_1] b", records) == r"a $1 \g<0> .* b"


def test_round_trip_through_the_engine():
    text = "Contact a@x.com and b@y.com, or call +1 212-555-7890."
    result = apply_redactions(text, DEFAULT_RULES)
    assert reinject_placeholders(result.text, result.redactions) == text


# ── Streaming ────────────────────────────────────────────────────────

def test_streaming_joins_split_placeholders():
    reinjector = StreamingReinjector(REDACTIONS)
    out = [reinjector.feed(chunk) for chunk in ["Hello __EM", "AIL_1", "__, bye"]]
    out.append(reinjector.flush())
    assert out[0] == "Hello "
    assert out[1] == ""
    assert "".join(out) == "Hello person@example.com, bye"


@pytest.mark.parametrize("text", [
    "Card __CARD_2__ and __EMAIL_1__ plus __UNKNOWN_9__ and a_b__c.",
    "___EMAIL_1__ trailing _",
    "ends mid token __EMAIL_1_",
])
def test_streaming_char_by_char_matches_batch(text):
    reinjector = StreamingReinjector(REDACTIONS)
    streamed = "".join(reinjector.feed(ch) for ch in text) + reinjector.flush()
    assert streamed == reinject_placeholders(text, REDACTIONS)


def test_streaming_gives_up_on_overlong_tokens():
    reinjector = StreamingReinjector(REDACTIONS, max_token_len=8)
    assert reinjector.feed("__ABCDEFGHIJ") == "__ABCDEFGHIJ"


# ── Audit ────────────────────────────────────────────────────────────

def test_finds_unknown_placeholders():
    assert find_unknown_placeholders("See __FOO_1__ and __EMAIL_1__", ["__EMAIL_1__"]) == ["__FOO_1__"]


def test_unknown_placeholders_are_unique_in_first_seen_order():
    text = "__B_2__ then __A_1__ then __B_2__ and __IBAN_NL_3__"
    assert find_unknown_placeholders(text, []) == ["__B_2__", "__A_1__", "__IBAN_NL_3__"]


def test_audit_ignores_non_placeholder_text():
    assert find_unknown_placeholders("", ["__A_1__"]) == []
    assert find_unknown_placeholders("__email_1__ and __EMAIL__ and _X_1_", []) == []
