"""Exceptions raised by cleanhtml."""


class CleanHTMLError(Exception):
    pass


class ConfigError(CleanHTMLError):
    """An option name or value was rejected."""
    pass


class AutopError(CleanHTMLError):
    """Paragraph reconstruction lost track of a protected block."""
    pass
