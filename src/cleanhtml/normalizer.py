"""Raw-text normalization applied around the HTML tree passes."""

import re

# Prepended before parsing so the markup is read as UTF-8
DOCUMENT_HEADER = (
    '<!DOCTYPE html><meta charset="utf-8">'
    '<meta http-equiv="Content-Type" content="text/html; charset=utf-8">'
)

NBSP = '\u00a0'

# Typographic quotes and their ASCII replacements
QUOTE_CHARS = {
    '\u00ab': '"',  # « Left-pointing double angle quotation mark
    '\u00bb': '"',  # » Right-pointing double angle quotation mark
    '\u2018': "'",  # ‘ Left single quotation mark
    '\u2019': "'",  # ’ Right single quotation mark
    '\u201a': "'",  # ‚ Single low-9 quotation mark
    '\u201b': "'",  # ‛ Single high-reversed-9 quotation mark
    '\u201c': '"',  # “ Left double quotation mark
    '\u201d': '"',  # ” Right double quotation mark
    '\u201e': '"',  # „ Double low-9 quotation mark
    '\u201f': '"',  # ‟ Double high-reversed-9 quotation mark
    '\u2039': "'",  # ‹ Single left-pointing angle quotation mark
    '\u203a': "'",  # › Single right-pointing angle quotation mark
}

_QUOTE_TABLE = str.maketrans(QUOTE_CHARS)

_SPACE_RUN_RE = re.compile(r'(?:\s|&nbsp;){2,}')
_SPACE_AFTER_OPEN_TAG_RE = re.compile(r'<(\w*)>(?:\s|&nbsp;)')
_DOUBLE_BR_RE = re.compile(r'\s*<br\s*/?>\s*<br\s*/?>', re.IGNORECASE)
_EMPTY_ELEMENT_RE = re.compile(r'<(\w+)[^>]*>(?:\s|&nbsp;)*</\1>')
_BLANK_LINES_RE = re.compile(r'(?:\n\s*){2,}')
_TRAILING_SPACE_RE = re.compile(r'\s\s+$')


class Preprocessor:
    """Best-effort string cleanup of pasted HTML before it is parsed.

    Applies, in order:
    1. Whitespace run collapsing (including ``&nbsp;``)
    2. Removal of a space right after an opening tag
    3. ``<br><br>`` to paragraph-start conversion (spreadsheet exports)
    4. Removal of elements holding only whitespace (one pass)
    5. UTF-8 document header

    None of these passes know about tags, so attribute values and ``<pre>``
    content are rewritten too.
    """

    def process(self, html: str) -> str:
        """Run every pass and return markup ready for parsing."""
        text = self._collapse_whitespace(html)
        text = self._strip_space_after_open_tags(text)
        text = self._double_breaks_to_paragraphs(text)
        text = self._remove_empty_elements(text)
        return DOCUMENT_HEADER + text

    def _collapse_whitespace(self, text: str) -> str:
        return _SPACE_RUN_RE.sub(' ', text)

    def _strip_space_after_open_tags(self, text: str) -> str:
        return _SPACE_AFTER_OPEN_TAG_RE.sub(r'<\1>', text)

    def _double_breaks_to_paragraphs(self, text: str) -> str:
        return _DOUBLE_BR_RE.sub('<p>', text)

    def _remove_empty_elements(self, text: str) -> str:
        """Drop ``<tag ...>   </tag>`` pairs. Nested empties need another run."""
        return _EMPTY_ELEMENT_RE.sub('', text)


def preprocess(html: str) -> str:
    """Convenience wrapper around :meth:`Preprocessor.process`."""
    return Preprocessor().process(html)


def collapse_blank_lines(text: str) -> str:
    """Turn NBSPs into spaces, squeeze blank lines and trailing whitespace."""
    text = text.replace(NBSP, ' ')
    text = _BLANK_LINES_RE.sub('\n', text)
    return _TRAILING_SPACE_RE.sub('', text)


def finalize(text: str) -> str:
    """Last touch on pipeline output: tidy whitespace, drop one final newline."""
    text = collapse_blank_lines(text)
    if text.endswith('\n'):
        text = text[:-1]
    return text


def change_quotes(text: str) -> str:
    """Replace typographic quotation marks with plain ASCII quotes."""
    return text.translate(_QUOTE_TABLE)
