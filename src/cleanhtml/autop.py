"""Paragraph reconstruction ("autop") for loosely formatted text.

Converts text delimited by blank lines and line breaks into ``<p>`` wrapped,
block-aware HTML. The algorithm is an ordered chain of whole-string regex
passes; the order matters because later passes clean up after earlier ones.

``<pre>`` blocks are swapped out for placeholder tokens first, so nothing
but the final restore ever touches their content.
"""

import logging
import re

from .errors import AutopError

logger = logging.getLogger(__name__)

# Tags that are never wrapped in an automatic paragraph
BLOCK_TAGS = frozenset([
    "table", "thead", "tfoot", "caption", "col", "colgroup", "tbody",
    "tr", "td", "th", "div", "dl", "dd", "dt", "ul", "ol", "li", "pre",
    "select", "option", "form", "map", "area", "blockquote", "address",
    "math", "style", "p", "h1", "h2", "h3", "h4", "h5", "h6", "hr",
    "fieldset", "noscript", "legend", "section", "article", "aside",
    "hgroup", "header", "footer", "nav", "figure", "figcaption", "details",
    "menu", "summary",
])

# Tags a trailing <br /> is dropped in front of
BREAK_ABSORBING_TAGS = ("p", "li", "div", "dl", "dd", "dt", "th", "pre", "td", "ul", "ol")

BR = "<br />"
PLACEHOLDER_PREFIX = "autop-pre-tag-"
PRESERVED_NEWLINE = "<autop-preserve-newline />"

_BLOCKS = "(?:" + "|".join(sorted(BLOCK_TAGS, key=len, reverse=True)) + r")\b"
_BLOCK_TAG = "</?" + _BLOCKS + "[^>]*>"

_PLACEHOLDER_RE = re.compile(r"<pre " + PLACEHOLDER_PREFIX + r"\d+></pre>")
_DOUBLE_BR_RE = re.compile(r"<br\s*/?>\s*<br\s*/?>")
_BLOCK_OPEN_RE = re.compile("(<" + _BLOCKS + "[^>]*>)")
_BLOCK_CLOSE_RE = re.compile("(</" + _BLOCKS + ">)")
_PARAM_RE = re.compile(r"\s*<param([^>]*)>\s*")
_EMBED_CLOSE_RE = re.compile(r"\s*</embed>\s*")
_NEWLINE_RUN_RE = re.compile(r"\n\n+")
_PARAGRAPH_SPLIT_RE = re.compile(r"\n\s*\n")

_EMPTY_PARAGRAPH_RE = re.compile(r"<p>\s*</p>")
_CONTAINER_CLOSE_RE = re.compile(r"<p>([^<]+)</(div|address|form)>")
_LONE_BLOCK_RE = re.compile(r"<p>\s*(" + _BLOCK_TAG + r")\s*</p>")
_LIST_ITEM_RE = re.compile(r"<p>(<li\b.+?)</p>")
_BLOCKQUOTE_OPEN_RE = re.compile(r"<p><blockquote([^>]*)>", re.IGNORECASE)
_LEADING_BLOCK_RE = re.compile(r"<p>\s*(" + _BLOCK_TAG + ")")
_TRAILING_BLOCK_RE = re.compile("(" + _BLOCK_TAG + r")\s*</p>")
_BREAK_AFTER_BLOCK_RE = re.compile("(" + _BLOCK_TAG + r")\s*<br />")
_BREAK_BEFORE_BLOCK_RE = re.compile(
    r"<br />(\s*</?(?:" + "|".join(BREAK_ABSORBING_TAGS) + r")\b[^>]*>)"
)
_RAW_TEXT_RE = re.compile(r"<(script|style).*?</\1>", re.DOTALL)
_LINE_BREAK_RE = re.compile(r"(?<!<br />)\s*\n")
_FINAL_NEWLINE_RE = re.compile(r"\n</p>$")


def _placeholder(index: int) -> str:
    return f"<pre {PLACEHOLDER_PREFIX}{index}></pre>"


def extract_preformatted(text: str) -> tuple[str, dict[str, str]]:
    """Swap complete ``<pre>...</pre>`` blocks for placeholder tokens.

    Returns the rewritten text and a token -> original block mapping.
    Whatever follows the last ``</pre>`` is returned untouched, including
    an unterminated ``<pre``.
    """
    if "<pre" not in text:
        return text, {}

    parts = text.split("</pre>")
    tail = parts.pop()
    blocks: dict[str, str] = {}
    output = []
    for part in parts:
        start = part.find("<pre")
        if start == -1:
            # Stray closing tag
            output.append(part + "</pre>")
            continue
        token = _placeholder(len(blocks))
        blocks[token] = part[start:] + "</pre>"
        output.append(part[:start] + token)

    output.append(tail)
    return "".join(output), blocks


def restore_preformatted(text: str, blocks: dict[str, str]) -> str:
    """Put the original ``<pre>`` blocks back in a single pass."""
    if not blocks:
        return text

    found = set(_PLACEHOLDER_RE.findall(text))
    missing = [token for token in blocks if token not in found]
    if missing:
        raise AutopError(f"lost preformatted blocks: {', '.join(missing)}")

    return _PLACEHOLDER_RE.sub(lambda m: blocks[m.group(0)], text)


def space_out_blocks(text: str) -> str:
    """Force line breaks around block tags and squeeze duplicate newlines."""
    text = _DOUBLE_BR_RE.sub("\n\n", text)
    text = _BLOCK_OPEN_RE.sub(r"\n\1", text)
    text = _BLOCK_CLOSE_RE.sub(r"\1\n\n", text)
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    if "<object" in text:
        text = clean_up_object_tags(text)
    return _NEWLINE_RUN_RE.sub("\n\n", text)


def clean_up_object_tags(text: str) -> str:
    """Remove whitespace around ``<param>`` and ``</embed>``; they must touch."""
    text = _PARAM_RE.sub(r"<param\1>", text)
    return _EMBED_CLOSE_RE.sub("</embed>", text)


def wrap_paragraphs(text: str) -> str:
    """Wrap every blank-line separated chunk in its own paragraph."""
    output = []
    for chunk in _PARAGRAPH_SPLIT_RE.split(text):
        if chunk:
            output.append("<p>" + chunk.strip("\n") + "</p>\n")
    return "".join(output)


def remove_breaks_near_blocks(text: str) -> str:
    text = _BREAK_AFTER_BLOCK_RE.sub(r"\1", text)
    return _BREAK_BEFORE_BLOCK_RE.sub(r"\1", text)


def clean_up_paragraphs(text: str) -> str:
    """Undo automatic paragraphs that ended up in the wrong place."""
    text = _EMPTY_PARAGRAPH_RE.sub("", text)
    text = _CONTAINER_CLOSE_RE.sub(r"<p>\1</p></\2>", text)
    text = _LONE_BLOCK_RE.sub(r"\1", text)
    text = _LIST_ITEM_RE.sub(r"\1", text)
    text = _BLOCKQUOTE_OPEN_RE.sub(r"<blockquote\1><p>", text)
    text = text.replace("</blockquote></p>", "</p></blockquote>")
    text = _LEADING_BLOCK_RE.sub(r"\1", text)
    text = _TRAILING_BLOCK_RE.sub(r"\1", text)
    return remove_breaks_near_blocks(text)


def add_line_breaks(text: str) -> str:
    """Turn remaining single newlines into ``<br />``, except in script/style."""
    text = _RAW_TEXT_RE.sub(lambda m: m.group(0).replace("\n", PRESERVED_NEWLINE), text)
    text = _LINE_BREAK_RE.sub(BR + "\n", text)
    return text.replace(PRESERVED_NEWLINE, "\n")


def autop(text: str, insert_line_breaks: bool = True) -> str:
    """Replace blank-line separated text with ``<p>`` paragraphs.

    Args:
        text: Loosely formatted text or HTML.
        insert_line_breaks: Also turn single newlines left inside
            paragraphs into ``<br />`` tags.

    Returns:
        Paragraph wrapped HTML, or an empty string for blank input.

    Raises:
        AutopError: If a protected ``<pre>`` block could not be restored.
    """
    if not text.strip():
        return ""

    text = text + "\n"
    text, blocks = extract_preformatted(text)
    if blocks:
        logger.debug("protected %d preformatted block(s)", len(blocks))

    text = space_out_blocks(text)
    text = wrap_paragraphs(text)
    text = clean_up_paragraphs(text)

    if insert_line_breaks:
        text = add_line_breaks(text)
        text = remove_breaks_near_blocks(text)

    text = _FINAL_NEWLINE_RE.sub("</p>", text)
    return restore_preformatted(text, blocks)


reconstruct = autop
