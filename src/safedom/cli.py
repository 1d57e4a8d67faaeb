"""CLI interface for safedom.

Usage:
    # Build an AI context from an HTML file (stdout: JSON)
    safedom context page.html --root "#support-form" > ctx.json

    # Redact plain text (stdin: text, stdout: {"text", "redactions"} JSON)
    echo 'Mail me at john@x.com' | safedom --country nl redact

    # Reinject originals into model output (stdin: text with placeholders)
    echo 'Hello __EMAIL_1__' | safedom reinject --redactions ctx.json

    # List placeholder-shaped tokens the redactions do not know about
    echo 'See __FOO_1__' | safedom audit --redactions ctx.json

    # Show the active rule set
    safedom --config safedom.yaml rules

Redaction files may be the full context JSON (with a "redactions" key)
or a bare list of redaction records.
"""

from __future__ import annotations
import argparse
import json
import sys
from pathlib import Path
from typing import Any

from .collector import build_ai_context
from .config import load_config, load_from_yaml, rules_from_config
from .exceptions import SafeDomError
from .nodes import HtmlNode
from .placeholders import find_unknown_placeholders
from .redaction import apply_redactions
from .reinject import reinject_placeholders
from .rules import available_countries
from .types import Redaction


def _load_settings(args: argparse.Namespace) -> dict[str, Any]:
    cfg = load_from_yaml(args.config) if args.config else load_config({})
    if args.country:
        cfg["countries"] = list(args.country)
    if args.no_generic_phone:
        cfg["include_generic_phone"] = False
    if args.no_generic_account:
        cfg["include_generic_account_number"] = False
    return cfg


def _load_redactions(path: str) -> list[Redaction]:
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if isinstance(data, dict):
        data = data.get("redactions", [])
    return [Redaction.from_dict(item) for item in data]


def _dump(data: Any) -> None:
    json.dump(data, sys.stdout, indent=2, ensure_ascii=False)
    sys.stdout.write("\n")


def cmd_context(args: argparse.Namespace) -> None:
    """Build an AI context from an HTML file."""
    cfg = _load_settings(args)
    document = HtmlNode.parse(Path(args.file).read_text(encoding="utf-8"))
    ctx = build_ai_context(
        args.root or document,
        document=document,
        labeled_only=not args.all_text and cfg["labeled_only"],
        redaction_rules=rules_from_config(cfg),
        region=cfg["region"],
    )
    _dump(ctx.to_dict())


def cmd_redact(args: argparse.Namespace) -> None:
    """Redact plain text on stdin."""
    rules = rules_from_config(_load_settings(args))
    result = apply_redactions(sys.stdin.read(), rules, args.start)
    _dump({"text": result.text, "redactions": [r.to_dict() for r in result.redactions]})


def cmd_reinject(args: argparse.Namespace) -> None:
    """Reinject originals into text on stdin."""
    redactions = _load_redactions(args.redactions)
    sys.stdout.write(reinject_placeholders(sys.stdin.read(), redactions))


def cmd_audit(args: argparse.Namespace) -> None:
    """List unknown placeholders in text on stdin."""
    known = [r.placeholder for r in _load_redactions(args.redactions)] if args.redactions else []
    _dump(find_unknown_placeholders(sys.stdin.read(), known))


def cmd_rules(args: argparse.Namespace) -> None:
    """Show the active rule set."""
    rules = rules_from_config(_load_settings(args))
    _dump([
        {
            "type": r.type,
            "placeholder_prefix": r.placeholder_prefix,
            "pattern": r.pattern.pattern,
            "validated": r.validate is not None,
        }
        for r in rules
    ])


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="safedom",
        description="Build AI-safe context from HTML and reinject redacted values",
    )
    parser.add_argument("--config", default=None, help="YAML config file")
    parser.add_argument(
        "--country", action="append", default=[],
        help=f"Country rules to add (repeatable; one of {', '.join(available_countries())})",
    )
    parser.add_argument("--no-generic-phone", action="store_true", help="Drop the generic phone rule")
    parser.add_argument("--no-generic-account", action="store_true", help="Drop the generic IBAN rule")

    sub = parser.add_subparsers(dest="command", required=True)

    p_context = sub.add_parser("context", help="Build an AI context from an HTML file")
    p_context.add_argument("file", help="HTML file")
    p_context.add_argument("--root", default=None, help="CSS selector of the root element")
    p_context.add_argument("--all-text", action="store_true", help="Also collect unlabeled text")

    p_redact = sub.add_parser("redact", help="Redact plain text (stdin)")
    p_redact.add_argument("--start", type=int, default=1, help="First placeholder counter")

    p_reinject = sub.add_parser("reinject", help="Reinject originals (stdin)")
    p_reinject.add_argument("--redactions", required=True, help="JSON file with redaction records")

    p_audit = sub.add_parser("audit", help="List unknown placeholders (stdin)")
    p_audit.add_argument("--redactions", default=None, help="JSON file with redaction records")

    sub.add_parser("rules", help="Show the active rule set")

    args = parser.parse_args(argv)

    cmds = {
        "context": cmd_context,
        "redact": cmd_redact,
        "reinject": cmd_reinject,
        "audit": cmd_audit,
        "rules": cmd_rules,
    }
    try:
        cmds[args.command](args)
    except SafeDomError as e:
        sys.stderr.write(f"safedom: {e}\n")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
