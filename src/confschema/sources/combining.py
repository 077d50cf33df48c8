"""
Source that combines other sources with first-match-wins precedence.
"""

from __future__ import annotations

import typing as _typing

import confschema.keys as keys
import confschema.sources.base as base


class CombiningSource(base.ConfigurationSource):
    """
    A combination of other sources.

    The value of a key is the value of the first source that has one. The
    first source has the highest priority and the last source the lowest.

    Sources may only be added before the combined source is handed to a
    schema; adding while a load is in progress is not supported.

    Args:
        sources: Initial sources in priority order (highest first).
    """

    def __init__(
        self,
        sources: _typing.Iterable[base.ConfigurationSource] | None = None,
    ) -> None:
        self._sources: list[base.ConfigurationSource] = list(sources or [])

    @property
    def description(self) -> str:
        return "combining source"

    @property
    def sources(self) -> tuple[base.ConfigurationSource, ...]:
        """The combined sources in priority order (highest first)."""
        return tuple(self._sources)

    def get(self, key: keys.ConfigurationKey) -> str | None:
        for source in self._sources:
            value = source.get(key)
            if value is not None:
                return value
        return None

    def contains(self, key: keys.ConfigurationKey) -> bool:
        return any(source.contains(key) for source in self._sources)

    def describe_key(self, key: keys.ConfigurationKey) -> str:
        for source in self._sources:
            if source.get(key) is not None:
                return f"{source.describe_key(key)} from {source.description}"
        return str(key)

    def add(self, source: base.ConfigurationSource) -> None:
        """Add ``source`` with the lowest priority."""
        self._sources.append(source)

    def add_all(self, sources: _typing.Iterable[base.ConfigurationSource]) -> None:
        """Add ``sources``, in order, with the lowest priority."""
        self._sources.extend(sources)
