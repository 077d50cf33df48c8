"""
Source backed by environment variables.

Matching of variable names is case-insensitive. The name for a key joins its
segments with underscores, upper-casing string segments: the key
``foo[0].baz`` is read from ``FOO_0_BAZ``.
"""

from __future__ import annotations

import os as _os
import typing as _typing

import confschema.constants as constants
import confschema.keys as keys
import confschema.sources.base as base


def environment_variable_name(key: keys.ConfigurationKey) -> str:
    """Return the environment variable name for ``key``."""
    parts: list[str] = []
    for segment in key.path:
        if isinstance(segment, str):
            if parts:
                parts.append(constants.ENVIRONMENT_SEPARATOR)
            parts.append(segment.upper())
        else:
            parts.append(f"{constants.ENVIRONMENT_SEPARATOR}{segment}")
    return "".join(parts)


class EnvironmentSource(base.ConfigurationSource):
    """
    Reads configuration values from a mapping of environment variables.

    Args:
        environment: Variable names to values. Names are upper-cased once,
            here, so lookups are case-insensitive.
    """

    def __init__(self, environment: _typing.Mapping[str, str]) -> None:
        self._environment: dict[str, str] = {
            name.upper(): value for name, value in environment.items()
        }

    @classmethod
    def from_environment(cls) -> EnvironmentSource:
        """Create a source from the variables of the current process."""
        return cls(_os.environ)

    @property
    def description(self) -> str:
        return "environment variables"

    def get(self, key: keys.ConfigurationKey) -> str | None:
        return self._environment.get(environment_variable_name(key))

    def contains(self, key: keys.ConfigurationKey) -> bool:
        prefix = environment_variable_name(key)
        return any(
            name.startswith(prefix)
            # Prefix must end at a segment boundary.
            and (len(name) == len(prefix) or name[len(prefix)] == constants.ENVIRONMENT_SEPARATOR)
            for name in self._environment
        )

    def describe_key(self, key: keys.ConfigurationKey) -> str:
        return environment_variable_name(key)
