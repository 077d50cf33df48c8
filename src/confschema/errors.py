"""
Configuration errors.

Two families of errors exist:

- Data errors describe invalid configuration. A ConfigurationError points at
  the source and key holding the invalid value; a ConfigurationException
  aggregates every data error found by one load.
- Structural errors describe an invalid schema tree. They are raised while
  the tree is built and are never deferred to load time.
"""

from __future__ import annotations

import typing as _typing

if _typing.TYPE_CHECKING:
    import confschema.keys as keys
    import confschema.sources.base as sources_base


class ConfigurationError(Exception):
    """
    A single configuration error.

    Carried by value inside load results, and raised directly by
    collaborators that fail outside of a schema load (file loaders, JSON
    configuration extraction).

    Args:
        message: What is wrong.
        source: The source that contains the invalid configuration, if any.
        key: The key pointing to the invalid configuration, if any.
    """

    def __init__(
        self,
        message: str,
        *,
        source: sources_base.ConfigurationSource | None = None,
        key: keys.ConfigurationKey | None = None,
    ) -> None:
        super().__init__(message)
        self._message = message
        self._source = source
        self._key = key

    @property
    def message(self) -> str:
        """A message describing the error."""
        return self._message

    @property
    def source(self) -> sources_base.ConfigurationSource | None:
        """The source that contains the invalid configuration, if any."""
        return self._source

    @property
    def key(self) -> keys.ConfigurationKey | None:
        """The key that points to the invalid configuration, if any."""
        return self._key

    @property
    def description(self) -> str:
        """Human readable "where: what" description of the error."""
        if self._source is not None and self._key is not None:
            return f"{self._source.describe_key(self._key)}: {self._message}"
        return self._message

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ConfigurationError):
            return NotImplemented
        return (
            self._message == other._message
            and self._source is other._source
            and self._key == other._key
        )

    def __hash__(self) -> int:
        return hash((self._message, id(self._source), self._key))

    def __str__(self) -> str:
        return self.description

    def __repr__(self) -> str:
        return (
            f"ConfigurationError({self._message!r}, "
            f"source={self._source!r}, key={self._key!r})"
        )


def format_errors(errors: _typing.Sequence[ConfigurationError]) -> str:
    """Render errors as a numbered list, one "where: what" line each."""
    noun = "error" if len(errors) == 1 else "errors"
    lines = [f"Found {len(errors)} configuration {noun}:"]
    lines.extend(f"  {index}. {error.description}" for index, error in enumerate(errors, 1))
    return "\n".join(lines)


class ConfigurationException(Exception):
    """
    Raised when loading configuration produced one or more errors.

    Args:
        errors: The errors found. Must not be empty.
    """

    def __init__(self, errors: _typing.Iterable[ConfigurationError]) -> None:
        self.errors: tuple[ConfigurationError, ...] = tuple(errors)
        if not self.errors:
            raise ValueError("ConfigurationException requires at least one error")
        super().__init__(format_errors(self.errors))

    @property
    def descriptions(self) -> list[str]:
        """The description of every error, in order."""
        return [error.description for error in self.errors]


class SchemaStructureError(Exception):
    """Raised when a schema tree is wired incorrectly."""

    pass


class DuplicatePropertyError(SchemaStructureError, ValueError):
    """Raised when an object schema declares the same property name twice."""

    pass


class NodeAlreadyAttachedError(SchemaStructureError):
    """Raised when a schema node is attached to a second parent."""

    pass
