"""Structural clean-ups for markup produced by rich-text editors.

Every function here takes a fragment and returns a new one; nodes are never
mutated in place, so the passes can be run and tested one at a time.
"""

from typing import Callable, Iterable, Optional

from .dom import Element, Fragment, Node, Text, export_html, significant_children

# Paragraphs holding a bold run shorter than this become headings
SHORT_BOLD_MAX_LENGTH = 60

BOLD_TAGS = frozenset(["b", "strong"])

# Attributes that only carry editor styling
PRESENTATIONAL_ATTRIBUTES = frozenset(["style", "class", "lang", "dir"])

# Called with (element, parent tag) and returns the replacement nodes
ElementRewrite = Callable[[Element, Optional[str]], Iterable[Node]]


def rewrite_elements(
    nodes: Iterable[Node],
    rewrite: ElementRewrite,
    parent: Optional[str] = None,
) -> Fragment:
    """Rebuild a tree bottom-up, replacing each element with ``rewrite``'s output.

    Children are rewritten before their parent sees them. Returning
    ``(element,)`` keeps an element, ``element.children`` unwraps it and
    ``()`` removes it.
    """
    result: list[Node] = []
    for node in nodes:
        if isinstance(node, Element):
            node = node.with_children(rewrite_elements(node.children, rewrite, node.tag))
            result.extend(rewrite(node, parent))
        else:
            result.append(node)
    return tuple(result)


def remove_script_tags(fragment: Fragment) -> Fragment:
    """Drop every ``<script>`` element along with its content."""
    return rewrite_elements(
        fragment,
        lambda el, parent: () if el.tag == "script" else (el,),
    )


def demote_headings(fragment: Fragment) -> Fragment:
    """Rename ``<h1>`` to ``<h2>``. Fragments never carry a page title."""
    return rewrite_elements(
        fragment,
        lambda el, parent: (el.renamed("h2"),) if el.tag == "h1" else (el,),
    )


def _sole_bold_child(element: Element) -> Optional[Element]:
    children = significant_children(element)
    if len(children) != 1:
        return None
    child = children[0]
    if isinstance(child, Element) and child.tag in BOLD_TAGS:
        return child
    return None


def synthesize_headings(fragment: Fragment) -> Fragment:
    """Turn ``<p><strong>Short line</strong></p>`` into ``<h2>Short line</h2>``.

    Editors fake headings with a short bold paragraph. Paragraphs that sit
    directly in a list item are list text, not headings, and are skipped.
    """
    def rewrite(el: Element, parent: Optional[str]):
        if el.tag != "p" or parent == "li":
            return (el,)
        bold = _sole_bold_child(el)
        if bold is None:
            return (el,)
        text = bold.text_content().strip()
        if not text or len(text) >= SHORT_BOLD_MAX_LENGTH:
            return (el,)
        return (Element("h2", el.attributes, bold.children),)

    return rewrite_elements(fragment, rewrite)


def unwrap_bold_headings(fragment: Fragment) -> Fragment:
    """``<h2><strong>Title</strong></h2>`` becomes ``<h2>Title</h2>``."""
    def rewrite(el: Element, parent: Optional[str]):
        if el.tag != "h2":
            return (el,)
        bold = _sole_bold_child(el)
        if bold is None:
            return (el,)
        return (el.with_children(bold.children),)

    return rewrite_elements(fragment, rewrite)


def is_presentational_span(element: Element) -> bool:
    if element.tag != "span":
        return False
    return all(name in PRESENTATIONAL_ATTRIBUTES for name, _ in element.attributes)


def strip_presentational_spans(fragment: Fragment) -> Fragment:
    """Replace styling-only ``<span>`` elements with their children."""
    return rewrite_elements(
        fragment,
        lambda el, parent: el.children if is_presentational_span(el) else (el,),
    )


def unwrap_list_item_paragraphs(fragment: Fragment) -> Fragment:
    """Lift the content of ``<li><p>...</p></li>`` into the list item.

    Consecutive paragraphs in one item stay separated by a newline.
    """
    def rewrite(el: Element, parent: Optional[str]):
        if el.tag != "li":
            return (el,)
        children: list[Node] = []
        previous_was_paragraph = False
        for child in el.children:
            if isinstance(child, Element) and child.tag == "p":
                if previous_was_paragraph:
                    children.append(Text("\n"))
                children.extend(child.children)
                previous_was_paragraph = True
            else:
                children.append(child)
                if not (isinstance(child, Text) and child.is_blank):
                    previous_was_paragraph = False
        return (el.with_children(children),)

    return rewrite_elements(fragment, rewrite)


def normalize_fragment(fragment: Fragment, first_pass: bool = False) -> str:
    """Apply the editor clean-ups in order and serialize the result.

    Paragraphs inside list items are only unwrapped on the first pass.
    """
    fragment = demote_headings(fragment)
    fragment = synthesize_headings(fragment)
    fragment = unwrap_bold_headings(fragment)
    fragment = strip_presentational_spans(fragment)
    if first_pass:
        fragment = unwrap_list_item_paragraphs(fragment)
    return export_html(fragment)
