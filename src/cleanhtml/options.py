"""Cleaning options and the allowed-tag specification derived from them."""

from dataclasses import asdict, dataclass, field, fields, replace
from types import MappingProxyType
from typing import Mapping

from .errors import ConfigError

# Tags that are always allowed unless stripping everything
BASELINE_TAGS = frozenset([
    "h1", "h2", "h3", "h4", "h5",
    "p", "strong", "b",
    "ul", "ol", "li",
    "hr", "pre", "code",
])

# Extra tags (and their attributes) switched on by each option
OPTION_TAGS: dict[str, dict[str, tuple[str, ...]]] = {
    "images": {"img": ("src", "alt")},
    "links": {"a": ("href", "target")},
    "italics": {"em": (), "i": ()},
    "table": {"table": (), "tr": (), "td": ()},
}


@dataclass(frozen=True)
class TagSpec:
    """Tags and per-tag attributes a sanitizing filter may keep."""
    tags: frozenset = field(default_factory=frozenset)
    attributes: Mapping[str, tuple[str, ...]] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "tags", frozenset(self.tags))
        object.__setattr__(self, "attributes", MappingProxyType(dict(self.attributes)))

    def __str__(self) -> str:
        parts = []
        for tag in sorted(self.tags):
            attrs = self.attributes.get(tag)
            parts.append(f"{tag}[{'|'.join(attrs)}]" if attrs else tag)
        return ",".join(parts)


@dataclass(frozen=True)
class CleanOptions:
    """Switches controlling which tags survive cleaning."""
    images: bool = False
    italics: bool = False
    links: bool = False
    strip: bool = False
    table: bool = False

    @classmethod
    def names(cls) -> list[str]:
        return [f.name for f in fields(cls)]

    @classmethod
    def from_mapping(cls, values: Mapping[str, bool]) -> "CleanOptions":
        return cls().updated(values)

    def updated(self, values: Mapping[str, bool]) -> "CleanOptions":
        """Return a copy with ``values`` applied.

        Every key and value is checked before anything is applied, so a
        rejected mapping never produces a partially updated copy.

        Raises:
            ConfigError: On the first unknown name, or failing that the first
                non-boolean value.
        """
        known = self.names()
        for name in values:
            if name not in known:
                raise ConfigError(f"{name} does not exist as a settable option.")
        for name, value in values.items():
            if not isinstance(value, bool):
                raise ConfigError(
                    f"{name} must be true or false, got {value!r}."
                )
        return replace(self, **dict(values))

    def as_dict(self) -> dict[str, bool]:
        return asdict(self)

    def allowed_tags(self) -> TagSpec:
        """Build the tag allowlist for these options."""
        if self.strip:
            return TagSpec()

        tags = set(BASELINE_TAGS)
        attributes: dict[str, tuple[str, ...]] = {}
        for name, extra in OPTION_TAGS.items():
            if not getattr(self, name):
                continue
            for tag, attrs in extra.items():
                tags.add(tag)
                if attrs:
                    attributes[tag] = attrs

        return TagSpec(tags=frozenset(tags), attributes=attributes)
