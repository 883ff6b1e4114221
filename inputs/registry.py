"""Activity sources by name, so config can pick one."""

from dataclasses import is_dataclass
from typing import Any, Type

from .base import ActivitySource, SourceConfig


_sources: dict[str, Type[ActivitySource]] = {}


def register(cls: Type[ActivitySource]) -> Type[ActivitySource]:
    """Decorator making a source selectable by its ``name`` (case-insensitive).

    The source must have its own name and a dataclass config extending
    SourceConfig, since create_source builds that config from JSON options.

    Raises:
        TypeError: If the class is not a usable activity source
        ValueError: If the name is taken
    """
    if not (isinstance(cls, type) and issubclass(cls, ActivitySource)):
        raise TypeError(f"{cls!r} is not an ActivitySource")
    if cls.name == ActivitySource.name or not cls.name:
        raise TypeError(f"{cls.__name__} must define a source name")
    config_class = cls.config_class
    if not (issubclass(config_class, SourceConfig) and is_dataclass(config_class)):
        raise TypeError(f"{cls.__name__}.config_class must be a SourceConfig dataclass")

    name = cls.name.lower()
    if name in _sources:
        raise ValueError(f"Source '{name}' is already registered")
    _sources[name] = cls
    return cls


def get_source(name: str) -> Type[ActivitySource] | None:
    return _sources.get(name.lower())


def list_sources() -> dict[str, Type[ActivitySource]]:
    """Copy of the registered sources, keyed by name."""
    return _sources.copy()


def create_source(name: str, options: dict[str, Any] | None = None) -> ActivitySource:
    """Build a registered source from its config options.

    Raises:
        KeyError: If no source is registered under ``name``
        TypeError: If ``options`` holds a field the source's config lacks
    """
    source_cls = get_source(name)
    if source_cls is None:
        known = ", ".join(sorted(_sources)) or "none"
        raise KeyError(f"Unknown activity source '{name}' (known: {known})")
    return source_cls(source_cls.config_class(**(options or {})))
