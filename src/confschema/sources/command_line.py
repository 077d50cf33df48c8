"""
Source backed by command line arguments.

Arguments take the form ``--key=value`` or ``--key value`` where ``key`` is
the canonical string form of a ConfigurationKey, e.g. ``--servers[0].port``.
"""

from __future__ import annotations

import typing as _typing

import confschema.constants as constants
import confschema.keys as keys
import confschema.sources.base as base

# Characters that may follow a flag name prefix at a segment boundary.
_BOUNDARY_CHARACTERS = (constants.KEY_SEPARATOR, "[")


def parse_arguments(arguments: _typing.Iterable[str]) -> dict[str, str]:
    """
    Parse command line arguments into a flag name to value mapping.

    ``--key=value`` binds directly (split at the first "="). ``--key``
    consumes the next token as its value; a trailing ``--key`` with nothing
    after it is dropped. Tokens that are not flags and not consumed as a
    value are ignored. Later flags override earlier ones.
    """
    parsed: dict[str, str] = {}
    tokens = iter(arguments)
    for token in tokens:
        if not token.startswith(constants.COMMAND_LINE_PREFIX):
            continue
        name, separator, value = token[len(constants.COMMAND_LINE_PREFIX) :].partition("=")
        if not separator:
            next_token = next(tokens, None)
            if next_token is None:
                continue
            value = next_token
        parsed[name] = value
    return parsed


class CommandLineSource(base.ConfigurationSource):
    """
    Reads configuration values from command line arguments.

    Args:
        arguments: The raw argument list, parsed once here.
    """

    def __init__(self, arguments: _typing.Iterable[str]) -> None:
        self._arguments = parse_arguments(arguments)

    @property
    def description(self) -> str:
        return "command line arguments"

    def get(self, key: keys.ConfigurationKey) -> str | None:
        return self._arguments.get(str(key))

    def contains(self, key: keys.ConfigurationKey) -> bool:
        prefix = str(key)
        return any(
            name.startswith(prefix)
            # Prefix must end at a segment boundary.
            and (len(name) == len(prefix) or name[len(prefix)] in _BOUNDARY_CHARACTERS)
            for name in self._arguments
        )

    def describe_key(self, key: keys.ConfigurationKey) -> str:
        return f"{constants.COMMAND_LINE_PREFIX}{key}"
