"""Tests for the config loader and the CLI."""

import io
import json

import pytest

from safedom import ConfigurationError, load_config, load_from_yaml, rules_from_config
from safedom.cli import main


# ── Config ───────────────────────────────────────────────────────────

def test_defaults():
    cfg = load_config({})
    assert cfg["labeled_only"] is True
    assert cfg["region"] is None
    assert cfg["countries"] == []
    assert cfg["extra_rules"] == []
    assert [r.type for r in rules_from_config(cfg)] == ["email", "iban", "creditcard", "ssn", "phone"]


def test_nested_config_with_extra_rules():
    cfg = load_config({
        "safedom": {
            "region": "eu",
            "countries": "nl",
            "include_generic_phone": False,
            "extra_rules": [
                {"type": "employee", "pattern": r"emp\d{5}", "placeholder_prefix": "__EMPLOYEE_",
                 "ignore_case": True},
            ],
        }
    })
    assert cfg["region"] == "eu"
    rules = rules_from_config(cfg)
    assert [r.type for r in rules] == ["iban-nl", "bsn-nl", "email", "iban", "creditcard", "ssn", "employee"]
    assert rules[-1].pattern.search("EMP12345")


@pytest.mark.parametrize("region", ["eu", "us", "global"])
def test_accepts_every_declared_region(region):
    assert load_config({"region": region})["region"] == region


@pytest.mark.parametrize("data", [
    {"extra_rules": ["not a mapping"]},
    {"extra_rules": [{"type": "x", "pattern": "("}]},
    {"extra_rules": [{"type": "x", "pattern": "(", "placeholder_prefix": "__X_"}]},
    {"extra_rules": {"type": "x"}},
    {"region": "mars"},
    {"labeled_only": "false"},
    {"include_generic_phone": "no"},
    {"include_generic_account_number": 0},
])
def test_invalid_config_raises(data):
    with pytest.raises(ConfigurationError):
        load_config(data)


def test_load_from_yaml(tmp_path):
    path = tmp_path / "safedom.yaml"
    path.write_text(
        "safedom:\n"
        "  labeled_only: false\n"
        "  countries: [de]\n"
        "  extra_rules:\n"
        "    - type: ticket\n"
        "      pattern: 'TCK-\\d{6}'\n"
        "      placeholder_prefix: __TICKET_\n",
        encoding="utf-8",
    )
    cfg = load_from_yaml(path)
    assert cfg["labeled_only"] is False
    assert cfg["countries"] == ["de"]
    assert cfg["extra_rules"][0].pattern.fullmatch("TCK-123456")


def test_load_from_yaml_rejects_non_mapping(tmp_path):
    path = tmp_path / "bad.yaml"
    path.write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        load_from_yaml(path)


# ── CLI ──────────────────────────────────────────────────────────────

PAGE = """<html><body>
  <div id="root">
    <p data-ai="redact:email" data-ai-label="body">Write to a@x.com</p>
    <p data-ai="exclude">hidden</p>
  </div>
</body></html>"""


def test_cli_context(tmp_path, capsys):
    page = tmp_path / "page.html"
    page.write_text(PAGE, encoding="utf-8")
    assert main(["context", str(page), "--root", "#root"]) == 0
    out = json.loads(capsys.readouterr().out)
    assert out["fields"] == {"body": "Write to __EMAIL_1__"}
    assert out["rawText"] == "Write to __EMAIL_1__"
    assert out["redactions"] == [{"placeholder": "__EMAIL_1__", "original": "a@x.com", "type": "email"}]


def test_cli_context_missing_root(tmp_path, capsys):
    page = tmp_path / "page.html"
    page.write_text(PAGE, encoding="utf-8")
    assert main(["context", str(page), "--root", "#nope"]) == 1
    assert "not found" in capsys.readouterr().err


def test_cli_redact_then_reinject(tmp_path, monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("Mail b@y.com"))
    assert main(["redact"]) == 0
    redacted = json.loads(capsys.readouterr().out)
    assert redacted["text"] == "Mail __EMAIL_1__"

    records = tmp_path / "redactions.json"
    records.write_text(json.dumps(redacted), encoding="utf-8")
    monkeypatch.setattr("sys.stdin", io.StringIO("Reply to __EMAIL_1__ about __FOO_1__"))
    assert main(["reinject", "--redactions", str(records)]) == 0
    assert capsys.readouterr().out == "Reply to b@y.com about __FOO_1__"

    monkeypatch.setattr("sys.stdin", io.StringIO("Reply to __EMAIL_1__ about __FOO_1__"))
    assert main(["audit", "--redactions", str(records)]) == 0
    assert json.loads(capsys.readouterr().out) == ["__FOO_1__"]


def test_cli_rules(capsys):
    assert main(["--country", "nl", "--no-generic-phone", "rules"]) == 0
    types = [r["type"] for r in json.loads(capsys.readouterr().out)]
    assert types == ["iban-nl", "bsn-nl", "email", "iban", "creditcard", "ssn"]


def test_cli_context_all_text_redacts_unlabeled_text(tmp_path, capsys):
    page = tmp_path / "page.html"
    page.write_text(
        '<html><body><div id="root">Call +1 555-123-4567 today'
        '<p data-ai="include">Hi</p></div></body></html>',
        encoding="utf-8",
    )
    assert main(["context", str(page), "--root", "#root", "--all-text"]) == 0
    out = json.loads(capsys.readouterr().out)
    assert out["rawText"] == "Hi\n\nCall __PHONE_1__ today"
    assert out["fields"] == {}
    assert out["redactions"] == [{"placeholder": "__PHONE_1__", "original": "+1 555-123-4567", "type": "phone"}]


def test_cli_audit_without_redactions_reports_every_placeholder(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("See __FOO_1__, __EMAIL_2__ and __FOO_1__"))
    assert main(["audit"]) == 0
    assert json.loads(capsys.readouterr().out) == ["__FOO_1__", "__EMAIL_2__"]
