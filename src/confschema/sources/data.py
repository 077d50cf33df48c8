"""
Source backed by a nested structure of maps and lists.

This is the shape produced by JSON and YAML parsers: mappings with string
keys, sequences, and str/bool/int/float/None scalars.
"""

from __future__ import annotations

import collections.abc as _abc
import datetime as _datetime
import typing as _typing

import confschema.keys as keys
import confschema.sources.base as base


class _Missing:
    __slots__ = ()

    def __repr__(self) -> str:
        return "<MISSING>"


_MISSING = _Missing()


def _is_sequence(value: object) -> bool:
    return isinstance(value, _abc.Sequence) and not isinstance(value, (str, bytes))


def stringify_scalar(value: object) -> str:
    """
    Convert a terminal scalar to its canonical string form.

    Raises:
        TypeError: If the value is not a supported scalar.
    """
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    # YAML parses unquoted timestamps into date/datetime objects.
    if isinstance(value, (_datetime.date, _datetime.time)):
        return value.isoformat()
    raise TypeError(f"Unsupported configuration value of type {type(value).__name__}: {value!r}")


class DataSource(base.ConfigurationSource):
    """
    Reads configuration values from nested maps and lists.

    Composite values (maps and lists) have no string value of their own,
    but contains() reports them so object and list schemas can detect them.

    Args:
        data: The root mapping.
        description: Human readable origin of the data, e.g. a file path.

    Raises:
        TypeError: If ``data`` is not a mapping.
    """

    def __init__(self, data: _typing.Mapping[_typing.Any, _typing.Any], description: str) -> None:
        if not isinstance(data, _abc.Mapping):
            raise TypeError(f"DataSource root must be a mapping, got {type(data).__name__}")
        self._data = data
        self._description = description

    @property
    def description(self) -> str:
        return self._description

    @property
    def data(self) -> _typing.Mapping[_typing.Any, _typing.Any]:
        """The root mapping."""
        return self._data

    def get(self, key: keys.ConfigurationKey) -> str | None:
        value = self._lookup(key)
        if value is _MISSING or value is None:
            return None
        if isinstance(value, _abc.Mapping) or _is_sequence(value):
            return None
        return stringify_scalar(value)

    def contains(self, key: keys.ConfigurationKey) -> bool:
        return self._lookup(key) is not _MISSING

    def describe_key(self, key: keys.ConfigurationKey) -> str:
        return str(key)

    def _lookup(self, key: keys.ConfigurationKey) -> object:
        current: object = self._data
        for segment in key.path:
            if current is None:
                # null in the middle of the path: nothing below it.
                return _MISSING
            if isinstance(segment, str):
                if not isinstance(current, _abc.Mapping) or segment not in current:
                    return _MISSING
                current = current[segment]
            else:
                if not _is_sequence(current):
                    return _MISSING
                sequence = _typing.cast(_abc.Sequence[object], current)
                if segment >= len(sequence):
                    return _MISSING
                current = sequence[segment]
        return current
