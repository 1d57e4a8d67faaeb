"""Directive traversal: builds an AI-safe context from a document subtree.

Usage:
    from safedom import HtmlNode, build_ai_context

    page = HtmlNode.parse(html)
    ctx = build_ai_context("#support-form", document=page)
    ctx.fields["subject"]     # labeled, cleaned text
    ctx.raw_text              # all fragments, blank-line separated
    ctx.redactions            # keep these to reinject the model's answer

Two passes:
    1. Directed pass, breadth-first from the root. ``exclude`` prunes the
       subtree; ``include`` and ``redact:<types>`` collect the node's text.
       Nodes without a directive collect nothing but are descended into.
    2. Fallback pass (``labeled_only=False`` only). Free text outside any
       directive-bearing subtree, redacted once with the full rule set.
"""

from __future__ import annotations
import logging
from collections import deque
from typing import Iterator, Literal, Sequence

from .context import ContextAssembler
from .directives import (
    DIRECTIVE_ATTRIBUTE,
    LABEL_ATTRIBUTE,
    Directive,
    DirectiveKind,
    parse_directive,
)
from .nodes import DocumentNode, resolve_root
from .redaction import apply_redactions
from .rules import DEFAULT_RULES, select_rules, validate_redaction_rules
from .types import AiContext, RedactionRule

logger = logging.getLogger(__name__)

Region = Literal["eu", "us", "global"]

_FALLBACK_SEPARATOR = "\n"


def _directive_of(node: DocumentNode) -> Directive | None:
    return parse_directive(node.get_attribute(DIRECTIVE_ATTRIBUTE))


def iter_directed_nodes(root: DocumentNode) -> Iterator[tuple[DocumentNode, Directive]]:
    """Yield directive-bearing nodes breadth-first, pruning excluded subtrees."""
    queue: deque[DocumentNode] = deque([root])
    while queue:
        node = queue.popleft()
        directive = _directive_of(node)
        if directive is not None:
            if directive.kind is DirectiveKind.EXCLUDE:
                continue
            yield node, directive
        queue.extend(node.children())


def collect_fallback_text(root: DocumentNode) -> list[str]:
    """Trimmed text runs outside every directive-bearing subtree, in document order."""
    if _directive_of(root) is not None:
        return []

    parts: list[str] = []
    stack = [root.content()]
    while stack:
        item = next(stack[-1], None)
        if item is None:
            stack.pop()
        elif isinstance(item, str):
            text = item.strip()
            if text:
                parts.append(text)
        elif _directive_of(item) is None:
            stack.append(item.content())
    return parts


def _label_of(node: DocumentNode) -> str | None:
    label = node.get_attribute(LABEL_ATTRIBUTE)
    return (label.strip() or None) if label else None


def build_ai_context(
    root: DocumentNode | str,
    *,
    document: DocumentNode | None = None,
    labeled_only: bool = True,
    redaction_rules: Sequence[RedactionRule] | None = None,
    region: Region | None = None,
) -> AiContext:
    """Build an AI-safe context from a document subtree.

    Args:
        root: The root node, or a selector resolved against ``document``.
        document: Node to resolve a selector root against.
        labeled_only: If False, free text outside directive-bearing
            subtrees is also collected (less privacy-preserving).
        redaction_rules: Active rule set; defaults to ``DEFAULT_RULES``.
        region: Hint only ("eu", "us", "global"). safedom never geolocates
            or makes network calls; callers may use it to pick rule sets.

    Raises:
        NotFoundError: if ``root`` is a selector that matches nothing.
        ConfigurationError: if a rule is not exhaustive-scanning.
    """
    resolved = resolve_root(root, document)
    rules = DEFAULT_RULES if redaction_rules is None else tuple(redaction_rules)
    validate_redaction_rules(rules)
    if region is not None:
        logger.debug("Region hint %r (no behaviour attached)", region)

    assembler = ContextAssembler()
    counter = 1

    for node, directive in iter_directed_nodes(resolved):
        if directive.kind is DirectiveKind.UNRECOGNIZED:
            logger.warning("Ignoring unrecognized %s directive %r", DIRECTIVE_ATTRIBUTE, directive.raw)
            continue

        text = node.text_or_value().strip()
        if not text:
            continue
        label = _label_of(node)

        if directive.kind is DirectiveKind.INCLUDE:
            assembler.add(text, label)
        elif directive.kind is DirectiveKind.REDACT:
            selected = select_rules(directive.types, rules)
            result = apply_redactions(text, selected, counter)
            counter += len(result.redactions)
            assembler.add(result.text, label, result.redactions)
        else:
            raise AssertionError(f"Unhandled directive kind: {directive.kind}")

        logger.debug("Collected %s node (label=%r)", directive.kind.value, label)

    if not labeled_only:
        fallback = _FALLBACK_SEPARATOR.join(collect_fallback_text(resolved)).strip()
        if fallback:
            result = apply_redactions(fallback, rules, counter)
            assembler.add(result.text, redactions=result.redactions)
            logger.debug("Fallback pass: %d chars, %d redactions", len(fallback), len(result.redactions))

    ctx = assembler.build()
    logger.debug(
        "Built AI context: %d fields, %d redactions", len(ctx.fields), len(ctx.redactions),
    )
    return ctx
