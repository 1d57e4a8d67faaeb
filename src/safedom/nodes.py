"""Document tree capability interface and its two implementations.

The traversal only ever reads attributes, children, interleaved content
and text/value from a node. ``HtmlNode`` adapts parsed HTML (lxml);
``MemoryNode`` is a plain in-memory tree for tests and for callers who
build trees programmatically. Neither is mutated by safedom.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Iterator, Protocol, Sequence, Union

import lxml.html

from .exceptions import NotFoundError

# Elements whose current value replaces their static content
FORM_CONTROL_TAGS = frozenset({"input", "textarea"})


class DocumentNode(Protocol):
    def get_attribute(self, name: str) -> str | None: ...

    def children(self) -> Sequence["DocumentNode"]:
        """Element children in document order."""
        ...

    def content(self) -> Iterator[Union[str, "DocumentNode"]]:
        """Text runs and element children, interleaved in document order."""
        ...

    def text_or_value(self) -> str:
        """Current value for form controls, else the full text content."""
        ...


# ── In-memory tree ───────────────────────────────────────────────────

@dataclass(eq=False)
class MemoryNode:
    """Element with attributes and mixed content.

    Example:
        MemoryNode("div", {"id": "root"}, [
            "General notice",
            MemoryNode("p", {"data-ai": "include"}, ["Included"]),
        ])
    """
    tag: str
    attributes: dict[str, str] = field(default_factory=dict)
    items: list[Union[str, "MemoryNode"]] = field(default_factory=list)
    value: str | None = None          # form-control value, if any

    def get_attribute(self, name: str) -> str | None:
        return self.attributes.get(name)

    def children(self) -> list["MemoryNode"]:
        return [item for item in self.items if isinstance(item, MemoryNode)]

    def content(self) -> Iterator[Union[str, "MemoryNode"]]:
        return iter(self.items)

    def text_or_value(self) -> str:
        if self.tag in FORM_CONTROL_TAGS and self.value is not None:
            return self.value
        return self._text_content()

    def _text_content(self) -> str:
        return "".join(
            item if isinstance(item, str) else item._text_content() for item in self.items
        )

    def query(self, selector: str) -> "MemoryNode | None":
        """Depth-first lookup by ``#id`` or bare tag name."""
        if selector.startswith("#"):
            def matches(node: MemoryNode) -> bool:
                return node.attributes.get("id") == selector[1:]
        else:
            def matches(node: MemoryNode) -> bool:
                return node.tag == selector

        stack = [self]
        while stack:
            node = stack.pop()
            if matches(node):
                return node
            stack.extend(reversed(node.children()))
        return None


# ── lxml adapter ─────────────────────────────────────────────────────

class HtmlNode:
    """Read-only view over an ``lxml.html`` element."""

    __slots__ = ("_element",)

    def __init__(self, element: lxml.html.HtmlElement) -> None:
        self._element = element

    @classmethod
    def parse(cls, markup: str) -> "HtmlNode":
        """Parse a full HTML document and wrap its root element."""
        return cls(lxml.html.document_fromstring(markup))

    @classmethod
    def fragment(cls, markup: str) -> "HtmlNode":
        """Parse a single HTML fragment (one top-level element)."""
        return cls(lxml.html.fragment_fromstring(markup))

    def get_attribute(self, name: str) -> str | None:
        return self._element.get(name)

    def children(self) -> list["HtmlNode"]:
        # Comments and processing instructions have non-string tags
        return [HtmlNode(child) for child in self._element if isinstance(child.tag, str)]

    def content(self) -> Iterator[Union[str, "HtmlNode"]]:
        if self._element.text:
            yield self._element.text
        for child in self._element:
            if isinstance(child.tag, str):
                yield HtmlNode(child)
            if child.tail:
                yield child.tail

    def text_or_value(self) -> str:
        if self._element.tag in FORM_CONTROL_TAGS:
            return self._element.value or ""
        return self._element.text_content()

    def query(self, selector: str) -> "HtmlNode | None":
        """First element matching a CSS selector, or None."""
        found = self._element.cssselect(selector)
        return HtmlNode(found[0]) if found else None

    def __repr__(self) -> str:
        return f"<HtmlNode {self._element.tag}>"


def resolve_root(
    root: DocumentNode | str,
    document: DocumentNode | None = None,
) -> DocumentNode:
    """Resolve a node or selector to a node.

    Raises:
        NotFoundError: if the selector matches nothing, or a selector is
            given without a document to resolve it against.
    """
    if not isinstance(root, str):
        return root
    if document is None:
        raise NotFoundError(f"Cannot resolve selector {root!r} without a document")
    query = getattr(document, "query", None)
    if query is None:
        raise NotFoundError(f"Document {document!r} does not support selector lookup")
    node = query(root)
    if node is None:
        raise NotFoundError(f"Root element not found for selector: {root}")
    return node
