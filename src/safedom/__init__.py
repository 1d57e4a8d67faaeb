"""safedom: AI-safe context from HTML, with reversible PII placeholders."""

from .collector import build_ai_context
from .config import load_config, load_from_yaml, rules_from_config
from .directives import Directive, DirectiveKind, parse_directive
from .exceptions import ConfigurationError, NotFoundError, SafeDomError
from .nodes import DocumentNode, HtmlNode, MemoryNode
from .placeholders import find_unknown_placeholders
from .redaction import apply_redactions
from .reinject import reinject_placeholders
from .rules import (
    DEFAULT_RULES,
    available_countries,
    create_redaction_rules,
    select_rules,
    validate_redaction_rules,
)
from .streaming import StreamingReinjector
from .types import AiContext, Redaction, RedactionResult, RedactionRule

__all__ = [
    "build_ai_context",
    "create_redaction_rules", "validate_redaction_rules", "select_rules",
    "available_countries", "DEFAULT_RULES",
    "apply_redactions",
    "reinject_placeholders", "StreamingReinjector",
    "find_unknown_placeholders",
    "load_config", "load_from_yaml", "rules_from_config",
    "Directive", "DirectiveKind", "parse_directive",
    "DocumentNode", "HtmlNode", "MemoryNode",
    "AiContext", "Redaction", "RedactionResult", "RedactionRule",
    "SafeDomError", "ConfigurationError", "NotFoundError",
]
__version__ = "0.1.0"
