"""
Base class for configuration sources.

A source is a read-only collection of string values addressed by
ConfigurationKeys. Flat backends (environment variables, command line flags)
and nested backends (parsed JSON/YAML) implement the same interface, so the
schema engine never needs to know which backend it reads from.
"""

from __future__ import annotations

import abc as _abc
import typing as _typing

import confschema.keys as keys

if _typing.TYPE_CHECKING:
    import confschema.sources.data as data


class ConfigurationSource(_abc.ABC):
    """
    A source of configuration values.

    Subclasses implement get(), contains(), describe_key() and the
    description property. Sources must not change while a schema is being
    loaded from them.
    """

    @property
    @_abc.abstractmethod
    def description(self) -> str:
        """A description of this source, e.g. the path of a file."""

    @_abc.abstractmethod
    def get(self, key: keys.ConfigurationKey) -> str | None:
        """Return the value under ``key`` as a string, or None."""

    @_abc.abstractmethod
    def contains(self, key: keys.ConfigurationKey) -> bool:
        """
        Return whether this source has a value under ``key``, or any value
        whose key is prefixed by ``key``.
        """

    @_abc.abstractmethod
    def describe_key(self, key: keys.ConfigurationKey) -> str:
        """
        Return how a human refers to ``key`` in this source.

        The description matches the format of the source, for example the
        environment variable name for environment variables.
        """

    def __contains__(self, key: object) -> bool:
        return isinstance(key, keys.ConfigurationKey) and self.contains(key)

    def load_json_conf(self) -> data.DataSource | None:
        """
        Parse the JSON object stored under ``conf.json`` into a new source.

        Returns:
            A DataSource with the parsed values, or None if this source has
            no value under ``conf.json``.

        Raises:
            ConfigurationError: If the value is not a JSON object.
        """
        import confschema.sources.json_conf as json_conf

        return json_conf.load_json_conf(self)

    def __repr__(self) -> str:
        return f"<{type(self).__name__}: {self.description}>"
