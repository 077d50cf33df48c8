"""
Schema node base classes and the load result type.

A schema is a tree of nodes. Each node knows how to produce a value of one
type from a ConfigurationSource at a key prefix. Composite nodes fork into
their children and merge the results, so a single load reports every error
in the tree instead of stopping at the first one.
"""

from __future__ import annotations

import abc as _abc
import asyncio as _asyncio
import dataclasses as _dataclasses
import typing as _typing

import confschema.errors as errors
import confschema.keys as keys
import confschema.sources as sources

T = _typing.TypeVar("T")
C = _typing.TypeVar("C")


@_dataclasses.dataclass(frozen=True)
class LoadResult(_typing.Generic[T]):
    """
    The outcome of loading one schema node: a value or a list of errors.

    Use success() and failure() rather than the constructor.
    """

    value: T | None = None
    errors: tuple[errors.ConfigurationError, ...] = ()

    @classmethod
    def success(cls, value: T) -> LoadResult[T]:
        """Create a successful result holding ``value``."""
        return cls(value=value)

    @classmethod
    def failure(cls, found: _typing.Iterable[errors.ConfigurationError]) -> LoadResult[T]:
        """Create a failed result holding ``found`` (must not be empty)."""
        found = tuple(found)
        if not found:
            raise ValueError("A failed LoadResult requires at least one error")
        return cls(errors=found)

    @property
    def has_errors(self) -> bool:
        """Whether loading failed."""
        return bool(self.errors)

    def unwrap(self) -> T:
        """
        Return the value, or raise the errors.

        Raises:
            ConfigurationException: If this result is a failure.
        """
        if self.errors:
            raise errors.ConfigurationException(self.errors)
        return _typing.cast(T, self.value)


class ConfigurationSchemaNode(_abc.ABC, _typing.Generic[T]):
    """
    A node in a configuration schema.

    A schema can load values of any type, such as int, bool or datetime, as
    well as composite types such as lists and custom objects. This is in
    contrast to sources, which only provide strings.

    A node belongs to at most one parent. Children are attached when the
    parent is constructed, and the tree never changes afterwards, so one
    schema can be loaded any number of times, concurrently.
    """

    def __init__(self) -> None:
        self._parent: ConfigurationSchemaNode[_typing.Any] | None = None
        self._children: list[ConfigurationSchemaNode[_typing.Any]] = []

    @property
    def parent(self) -> ConfigurationSchemaNode[_typing.Any] | None:
        """The parent node, or None if this node is a root."""
        return self._parent

    @property
    def children(self) -> tuple[ConfigurationSchemaNode[_typing.Any], ...]:
        """The children of this node."""
        return tuple(self._children)

    @_abc.abstractmethod
    async def load_result(
        self,
        source: sources.ConfigurationSource,
        key: keys.ConfigurationKey | None = None,
    ) -> LoadResult[T]:
        """
        Load the value defined by this node at the ``key`` prefix.

        Returns:
            A successful result holding the value, or a failed result
            holding every configuration error found.
        """

    async def load(
        self,
        source: sources.ConfigurationSource,
        key: keys.ConfigurationKey | None = None,
    ) -> T:
        """
        Load the value defined by this node, raising on invalid configuration.

        Raises:
            ConfigurationException: With every error found.
        """
        result = await self.load_result(source, key)
        return result.unwrap()

    def load_sync(
        self,
        source: sources.ConfigurationSource,
        key: keys.ConfigurationKey | None = None,
    ) -> T:
        """Run load() to completion on a new event loop."""
        return _asyncio.run(self.load(source, key))

    def _attach(self, child: ConfigurationSchemaNode[_typing.Any]) -> None:
        if child is self:
            raise errors.NodeAlreadyAttachedError("A schema node cannot be its own child.")
        if child._parent is not None:
            raise errors.NodeAlreadyAttachedError(
                f"{type(child).__name__} has already been added to another parent node "
                f"({type(child._parent).__name__})."
            )
        child._parent = self
        self._children.append(child)

    def _require_key(self, key: keys.ConfigurationKey | None) -> keys.ConfigurationKey:
        if key is None:
            raise ValueError(
                f"{type(self).__name__} must be loaded with a key; "
                "wrap it in a property or rebase it to use it as a root node."
            )
        return key


class SingleChildSchemaNode(ConfigurationSchemaNode[T], _typing.Generic[C, T]):
    """A node that wraps exactly one child node producing ``C``."""

    def __init__(self, child: ConfigurationSchemaNode[C]) -> None:
        super().__init__()
        self._attach(child)

    @property
    def child(self) -> ConfigurationSchemaNode[C]:
        """The wrapped node."""
        return _typing.cast(ConfigurationSchemaNode[C], self._children[0])
