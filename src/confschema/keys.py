"""
Configuration keys.

A key points to a location in a structure of nested maps and lists. The
location is stored as a tuple of segments: strings are keys in maps, integers
are indices in lists.

Canonical string form joins string segments with "." and renders integer
segments as "[n]" directly after the preceding segment::

    >>> str(ConfigurationKey(["a", 0, "b"]))
    'a[0].b'
"""

from __future__ import annotations

import re as _re
import typing as _typing

import confschema.constants as constants

Segment = str | int
"""A single path segment: a map key or a list index."""

_INDEX_PATTERN = _re.compile(r"\[(\d+)\]")


class InvalidKeyError(ValueError):
    """Raised when a key path violates the key invariants."""

    pass


def _validate_segment(path: tuple[_typing.Any, ...], segment: _typing.Any) -> None:
    # bool is an int subclass but never a valid index.
    if isinstance(segment, bool) or not isinstance(segment, (str, int)):
        raise InvalidKeyError(f"Key path {path!r} must only contain strings and integers")
    if isinstance(segment, int):
        if segment < 0:
            raise InvalidKeyError(f"Key path {path!r} must not contain negative integers")
        return
    if not segment:
        raise InvalidKeyError(f"Key path {path!r} must not contain empty strings")
    if constants.KEY_SEPARATOR in segment:
        raise InvalidKeyError(
            f"Key path {path!r} must not contain strings containing "
            f'"{constants.KEY_SEPARATOR}"'
        )


class ConfigurationKey:
    """
    An immutable path into a nested configuration structure.

    Keys are validated once, at construction. Equality and hashing are
    structural, so keys can be used as dict keys and compared freely.

    Args:
        path: Non-empty iterable of segments. Strings must be non-empty and
            must not contain "."; integers must be non-negative.

    Raises:
        InvalidKeyError: If the path violates any of the rules above.
    """

    __slots__ = ("_path",)

    def __init__(self, path: _typing.Iterable[Segment]) -> None:
        if isinstance(path, str):
            # A bare string is a single segment, not a sequence of characters.
            path = (path,)
        segments = tuple(path)
        if not segments:
            raise InvalidKeyError("Key path must not be empty")
        for segment in segments:
            _validate_segment(segments, segment)
        self._path: tuple[Segment, ...] = segments

    @classmethod
    def parse(cls, text: str) -> ConfigurationKey:
        """
        Parse the canonical string form of a key.

        Inverse of ``str(key)``: ``"a[0].b"`` becomes ``["a", 0, "b"]``.

        Raises:
            InvalidKeyError: If the text is not a canonical key.
        """
        segments: list[Segment] = []
        for part in text.split(constants.KEY_SEPARATOR):
            bracket = part.find("[")
            name = part if bracket < 0 else part[:bracket]
            indices = "" if bracket < 0 else part[bracket:]
            if name:
                segments.append(name)
            elif not indices or segments:
                # Only the very first part may start with an index.
                raise InvalidKeyError(f"Invalid key {text!r}: empty segment")
            position = 0
            while position < len(indices):
                match = _INDEX_PATTERN.match(indices, position)
                if match is None:
                    raise InvalidKeyError(f"Invalid key {text!r}: malformed index in {part!r}")
                segments.append(int(match.group(1)))
                position = match.end()
        return cls(segments)

    @property
    def path(self) -> tuple[Segment, ...]:
        """The segments of this key."""
        return self._path

    def __add__(self, other: ConfigurationKey | Segment) -> ConfigurationKey:
        """Return a new key with ``other`` (a segment or a key) appended."""
        if isinstance(other, ConfigurationKey):
            return ConfigurationKey(self._path + other._path)
        return ConfigurationKey((*self._path, other))

    def __len__(self) -> int:
        return len(self._path)

    def __iter__(self) -> _typing.Iterator[Segment]:
        return iter(self._path)

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, ConfigurationKey):
            return NotImplemented
        # Compare types too so that a str segment "1" never equals index 1.
        return len(self._path) == len(other._path) and all(
            type(a) is type(b) and a == b for a, b in zip(self._path, other._path)
        )

    def __hash__(self) -> int:
        return hash(self._path)

    def __str__(self) -> str:
        parts: list[str] = []
        for segment in self._path:
            if isinstance(segment, str):
                if parts:
                    parts.append(constants.KEY_SEPARATOR)
                parts.append(segment)
            else:
                parts.append(f"[{segment}]")
        return "".join(parts)

    def __repr__(self) -> str:
        return f"ConfigurationKey({list(self._path)!r})"
