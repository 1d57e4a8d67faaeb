"""YAML/dict config loader for safedom.

Supports loading from a YAML file or a plain dict (for embedding in a
larger application config).

Example YAML:

    safedom:
      labeled_only: true
      region: eu
      countries:
        - nl
        - de
      include_generic_phone: true
      include_generic_account_number: true
      extra_rules:
        - type: ticket
          pattern: "TCK-\\d{6}"
          placeholder_prefix: "__TICKET_"
        - type: employee
          pattern: "emp[0-9]{5}"
          placeholder_prefix: "__EMPLOYEE_"
          ignore_case: true
"""

from __future__ import annotations
import re
from pathlib import Path
from typing import Any, Mapping, get_args

from .collector import Region
from .exceptions import ConfigurationError
from .rules import create_redaction_rules
from .types import RedactionRule

_REGIONS = get_args(Region)


def _flag(data: Mapping[str, Any], key: str, default: bool) -> bool:
    value = data.get(key, default)
    if not isinstance(value, bool):
        raise ConfigurationError(f"{key} must be true or false, got {value!r}")
    return value


def _compile_rule(entry: Any, index: int) -> RedactionRule:
    if not isinstance(entry, Mapping):
        raise ConfigurationError(f"extra_rules[{index}] must be a mapping, got {type(entry).__name__}")
    missing = [k for k in ("type", "pattern", "placeholder_prefix") if not entry.get(k)]
    if missing:
        raise ConfigurationError(f"extra_rules[{index}] is missing {', '.join(missing)}")

    flags = re.IGNORECASE if entry.get("ignore_case", False) else 0
    try:
        pattern = re.compile(str(entry["pattern"]), flags)
    except re.error as e:
        raise ConfigurationError(f"extra_rules[{index}] has an invalid pattern: {e}") from e

    return RedactionRule(
        type=str(entry["type"]),
        pattern=pattern,
        placeholder_prefix=str(entry["placeholder_prefix"]),
    )


def load_config(data: Mapping[str, Any]) -> dict[str, Any]:
    """Normalize a config dict (from YAML or inline)."""
    # Support nested under "safedom" key or flat
    if "safedom" in data:
        data = data["safedom"] or {}

    region = data.get("region")
    if region is not None and region not in _REGIONS:
        raise ConfigurationError(f"region must be one of {_REGIONS}, got {region!r}")

    countries = data.get("countries") or []
    if isinstance(countries, str):
        countries = [countries]

    extra = data.get("extra_rules") or []
    if not isinstance(extra, list):
        raise ConfigurationError("extra_rules must be a list")

    return {
        "labeled_only": _flag(data, "labeled_only", True),
        "region": region,
        "countries": [str(c) for c in countries],
        "include_generic_phone": _flag(data, "include_generic_phone", True),
        "include_generic_account_number": _flag(data, "include_generic_account_number", True),
        "extra_rules": [_compile_rule(entry, i) for i, entry in enumerate(extra)],
    }


def load_from_yaml(path: str | Path) -> dict[str, Any]:
    """Load config from a YAML file."""
    import yaml  # optional dependency
    try:
        with open(path, encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Failed to parse {path}: {e}") from e
    if raw is None:
        raw = {}
    if not isinstance(raw, Mapping):
        raise ConfigurationError(f"{path} must contain a mapping at the top level")
    return load_config(raw)


def rules_from_config(cfg: Mapping[str, Any]) -> tuple[RedactionRule, ...]:
    """Build the rule set described by a normalized config."""
    return create_redaction_rules(
        countries=cfg.get("countries", []),
        include_generic_phone=cfg.get("include_generic_phone", True),
        include_generic_account_number=cfg.get("include_generic_account_number", True),
        extra_rules=cfg.get("extra_rules", []),
    )
