"""Allowlist filtering of serialized fragments.

The pipeline treats the filter as an opaque text transform: markup goes in,
markup restricted to a :class:`TagSpec` comes out. :class:`BleachFilter` is
the default implementation.
"""

import logging
import re
from abc import ABC, abstractmethod

import bleach

from .options import TagSpec

logger = logging.getLogger(__name__)

# Dropped with their content before filtering
_RAW_TEXT_RE = re.compile(
    r"<(script|style)\b[^>]*>.*?</\1\s*>", flags=re.DOTALL | re.IGNORECASE
)

# Elements kept even when they have no content
KEEP_EMPTY = frozenset(["td", "th"])

_EMPTY_ELEMENT_RE = re.compile(
    r"<([a-zA-Z][a-zA-Z0-9]*)\b[^>]*>(?:\s|&nbsp;|&#160;|&#xa0;)*</\1>",
    flags=re.IGNORECASE,
)


class SanitizingFilter(ABC):
    """Base class for allowlist filters."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable filter name."""
        pass

    @abstractmethod
    def filter(self, fragment: str, allowed: TagSpec) -> str:
        """Return ``fragment`` with every tag and attribute outside ``allowed`` removed."""
        pass


class BleachFilter(SanitizingFilter):
    """Allowlist filter backed by bleach.

    Policy:
    - Tags outside the allowlist are stripped, their text is kept
    - Only the listed attributes survive; inline ``style`` never does
    - ``<script>`` and ``<style>`` disappear together with their content
    - Comments are removed
    - Elements left empty (or holding only whitespace/NBSP) are removed
    - Non-ASCII characters are left as they are
    """

    def __init__(self, protocols: tuple[str, ...] = ("http", "https", "mailto")):
        self._protocols = protocols

    @property
    def name(self) -> str:
        return "BleachFilter"

    def filter(self, fragment: str, allowed: TagSpec) -> str:
        text = _RAW_TEXT_RE.sub("", fragment)
        text = bleach.clean(
            text,
            tags=set(allowed.tags),
            attributes={tag: list(attrs) for tag, attrs in allowed.attributes.items()},
            protocols=list(self._protocols),
            strip=True,
            strip_comments=True,
        )
        text = remove_empty_elements(text)
        logger.debug("%s kept %d of %d characters", self.name, len(text), len(fragment))
        return text


def remove_empty_elements(text: str) -> str:
    """Remove empty elements, repeating until nested empties are gone too."""
    def drop(match: re.Match) -> str:
        if match.group(1).lower() in KEEP_EMPTY:
            return match.group(0)
        return ""

    while True:
        cleaned = _EMPTY_ELEMENT_RE.sub(drop, text)
        if cleaned == text:
            return cleaned
        text = cleaned
