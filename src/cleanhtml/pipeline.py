"""The ``clean`` pipeline: pasted HTML in, minimal allowlisted fragment out."""

import logging
from typing import Mapping, Optional, Union

from .dom import parse_fragment
from .normalizer import DOCUMENT_HEADER, finalize, preprocess
from .options import CleanOptions
from .sanitize import BleachFilter, SanitizingFilter
from .transforms import normalize_fragment, remove_script_tags

logger = logging.getLogger(__name__)


class CleanHTML:
    """Clean HTML pasted from editors, getting rid of unnecessary tags.

    Holds the current options; every call to :meth:`clean` takes a snapshot
    of them and builds its own trees, so one instance can serve concurrent
    callers as long as options aren't changed meanwhile.
    """

    def __init__(
        self,
        options: Optional[Union[Mapping[str, bool], CleanOptions]] = None,
        sanitizer: Optional[SanitizingFilter] = None,
    ):
        """Initialize the cleaner.

        Args:
            options: Option overrides, see :class:`CleanOptions`.
            sanitizer: Allowlist filter. Defaults to :class:`BleachFilter`.

        Raises:
            ConfigError: If ``options`` names an unknown option.
        """
        self._options = CleanOptions()
        self._sanitizer = sanitizer or BleachFilter()
        if options is not None:
            self.set_options(options)

    def set_options(self, options: Union[Mapping[str, bool], CleanOptions]) -> None:
        """Apply option overrides.

        Nothing is applied unless every key and value is valid.

        Raises:
            ConfigError: Naming the first unknown option.
        """
        if isinstance(options, CleanOptions):
            self._options = options
        else:
            self._options = self._options.updated(options)
        logger.debug("options set to %s", self._options)

    def get_options(self) -> dict[str, bool]:
        """Snapshot of the current options."""
        return self._options.as_dict()

    def clean(self, html: str) -> str:
        """Clean ``html`` into a fragment restricted to the allowed tags."""
        options = self._options
        allowed = options.allowed_tags()

        # 1: string level fixes, then parse
        fragment = parse_fragment(preprocess(html))

        # 2: scripts never survive, whatever the options
        fragment = remove_script_tags(fragment)

        # 3: first clean of the editor artifacts
        output = normalize_fragment(fragment, first_pass=True)
        logger.debug("first pass produced %d characters", len(output))

        # 4: allowlist filter
        output = self._sanitizer.filter(output, allowed)

        # 5: one more clean to pick up p/strong pairs the filter exposed
        fragment = parse_fragment(DOCUMENT_HEADER + output)
        output = normalize_fragment(fragment)

        return finalize(output)


def clean(html: str, options: Optional[Mapping[str, bool]] = None) -> str:
    """Clean ``html`` with a throwaway :class:`CleanHTML`."""
    return CleanHTML(options).clean(html)
