"""Option file loading.

Options are read from a YAML mapping of option names to booleans::

    images: true
    links: true

Without an explicit path the first existing file wins:
1. .cleanhtml.yaml in the current directory (project config)
2. ~/.config/cleanhtml/options.yaml (user config)
"""

import logging
from pathlib import Path
from typing import Optional, Union

from .errors import ConfigError
from .options import CleanOptions

logger = logging.getLogger(__name__)

# Lazy import yaml to avoid startup cost
_yaml = None


def _get_yaml():
    """Lazy-load PyYAML."""
    global _yaml
    if _yaml is None:
        import yaml
        _yaml = yaml
    return _yaml


class OptionsConfig:
    """Locate and read an options file."""

    CONFIG_LOCATIONS = [
        Path.cwd() / ".cleanhtml.yaml",                            # Project config
        Path.home() / ".config" / "cleanhtml" / "options.yaml",    # User config
    ]

    def __init__(self, path: Optional[Union[str, Path]] = None):
        self.path = Path(path) if path is not None else None

    def find_config_file(self) -> Optional[Path]:
        """Return the file to read, or None when no config exists."""
        if self.path is not None:
            return self.path
        for config_file in self.CONFIG_LOCATIONS:
            if config_file.is_file():
                return config_file
        return None

    def load(self) -> CleanOptions:
        """Read the options file, falling back to defaults when there is none.

        Raises:
            ConfigError: The file can't be read, isn't valid YAML, isn't a
                mapping, or names an unknown option.
        """
        config_file = self.find_config_file()
        if config_file is None:
            return CleanOptions()

        logger.debug("loading options from %s", config_file)
        yaml = _get_yaml()

        try:
            content = config_file.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"cannot read {config_file}: {e}") from e

        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigError(f"invalid YAML in {config_file}: {e}") from e

        if not data:
            return CleanOptions()
        if not isinstance(data, dict):
            raise ConfigError(f"{config_file} must contain a mapping of options")

        return CleanOptions.from_mapping(data)


def load_options(path: Optional[Union[str, Path]] = None) -> CleanOptions:
    """Convenience wrapper around :meth:`OptionsConfig.load`."""
    return OptionsConfig(path).load()
