"""Immutable HTML fragment model with permissive parsing and serialization."""

import html
from dataclasses import dataclass, replace
from typing import Iterable, Optional, Union

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import PreformattedString

from .normalizer import collapse_blank_lines

# Elements serialized without a closing tag
VOID_ELEMENTS = frozenset([
    "area", "base", "br", "col", "embed", "hr", "img", "input",
    "link", "meta", "param", "source", "track", "wbr",
])

# Elements whose text is written out unescaped
RAW_TEXT_ELEMENTS = frozenset(["script", "style"])

# Document-level elements dropped when they show up among body content
HEADER_ELEMENTS = frozenset(["head", "meta", "title", "link", "base"])


@dataclass(frozen=True)
class Text:
    """A run of character data."""
    content: str

    @property
    def is_blank(self) -> bool:
        return not self.content.strip()


@dataclass(frozen=True)
class Element:
    """An HTML element. Attributes keep their source order."""
    tag: str
    attributes: tuple[tuple[str, str], ...] = ()
    children: tuple["Node", ...] = ()

    @property
    def attrs(self) -> dict[str, str]:
        """Mapping view of the attributes."""
        return dict(self.attributes)

    def renamed(self, tag: str) -> "Element":
        """Same attributes and children under a new tag name."""
        return replace(self, tag=tag)

    def with_children(self, children: Iterable["Node"]) -> "Element":
        return replace(self, children=tuple(children))

    def text_content(self) -> str:
        return "".join(
            child.content if isinstance(child, Text) else child.text_content()
            for child in self.children
        )


Node = Union[Element, Text]
Fragment = tuple[Node, ...]


def significant_children(element: Element) -> list[Node]:
    """Children of ``element`` minus whitespace-only text."""
    return [
        child for child in element.children
        if not (isinstance(child, Text) and child.is_blank)
    ]


# -- Parsing -----------------------------------------------------------------

def _convert(node) -> Optional[Node]:
    """Turn a BeautifulSoup node into a Node, dropping comments and doctypes."""
    if isinstance(node, Tag):
        children = (_convert(child) for child in node.children)
        return Element(
            tag=node.name,
            attributes=tuple(
                (name, value if isinstance(value, str) else " ".join(value))
                for name, value in node.attrs.items()
            ),
            children=tuple(child for child in children if child is not None),
        )
    if isinstance(node, PreformattedString):
        # Comment, Doctype, CData, Declaration, ProcessingInstruction
        return None
    if isinstance(node, NavigableString):
        return Text(str(node))
    return None


# Document wrappers whose contents are lifted to the top level
WRAPPER_ELEMENTS = frozenset(["html", "body"])


def _top_level(container) -> Iterable:
    """Yield content nodes in document order, looking through html/body.

    ``html.parser`` leaves text placed before ``<body>`` or after
    ``</html>`` as siblings of those elements, so they are walked rather
    than picked.
    """
    for child in container.children:
        if isinstance(child, Tag):
            if child.name in WRAPPER_ELEMENTS:
                yield from _top_level(child)
                continue
            if child.name in HEADER_ELEMENTS:
                continue
        yield child


def parse_fragment(markup: str) -> Fragment:
    """Parse loose markup into the nodes that make up its body.

    Parsing never fails: unbalanced or invalid markup is recovered by
    Python's ``html.parser`` through BeautifulSoup. Document wrappers are
    looked through and header elements dropped, so content outside
    ``<body>`` is kept alongside the body's children.
    """
    soup = BeautifulSoup(markup, "html.parser", multi_valued_attributes=None)

    nodes = []
    for child in _top_level(soup):
        node = _convert(child)
        if node is not None:
            nodes.append(node)
    return tuple(nodes)


# -- Serialization -----------------------------------------------------------

def _serialize_attributes(element: Element) -> str:
    return "".join(
        f' {name}="{html.escape(value, quote=True)}"'
        for name, value in element.attributes
    )


def to_html(node: Node, raw_text: bool = False) -> str:
    """Serialize a node. Void elements are written XML style (``<br/>``)."""
    if isinstance(node, Text):
        return node.content if raw_text else html.escape(node.content, quote=False)

    attrs = _serialize_attributes(node)
    if node.tag in VOID_ELEMENTS and not node.children:
        return f"<{node.tag}{attrs}/>"

    raw = node.tag in RAW_TEXT_ELEMENTS
    inner = "".join(to_html(child, raw_text=raw) for child in node.children)
    return f"<{node.tag}{attrs}>{inner}</{node.tag}>"


def export_html(fragment: Fragment) -> str:
    """Write each top-level node on its own line and tidy the whitespace."""
    output = "".join(
        to_html(node) + "\n"
        for node in fragment
        if not (isinstance(node, Text) and node.is_blank)
    )
    return collapse_blank_lines(output)
