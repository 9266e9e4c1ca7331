"""Normalize pasted HTML into minimal, allowlisted semantic markup."""

from .autop import autop, reconstruct
from .config import OptionsConfig, load_options
from .errors import AutopError, CleanHTMLError, ConfigError
from .normalizer import change_quotes
from .options import CleanOptions, TagSpec
from .pipeline import CleanHTML, clean
from .sanitize import BleachFilter, SanitizingFilter

__all__ = [
    "CleanHTML",
    "clean",
    "autop",
    "reconstruct",
    "change_quotes",
    "CleanOptions",
    "TagSpec",
    "OptionsConfig",
    "load_options",
    "SanitizingFilter",
    "BleachFilter",
    "CleanHTMLError",
    "ConfigError",
    "AutopError",
]
